"""JSON file storage for named units."""

import asyncio
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from footprints.services.records import BlobStorage


@dataclass
class JsonFileStorage(BlobStorage):
    """Stores each named unit as one file, replaced atomically on write."""

    directory: Path

    async def get_item(self, key: str) -> str | None:
        """Return the file contents for a key, if the file exists."""
        return await asyncio.to_thread(self._read, key)

    async def set_item(self, key: str, value: str) -> None:
        """Replace the file for a key."""
        await asyncio.to_thread(self._write, key, value)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def _read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, self.path_for(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
