"""Device providers for hosts without native location or camera APIs."""

import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path

from footprints.domain.errors import DeviceUnavailableError
from footprints.domain.records import Address, Coordinates
from footprints.services.providers import CameraProvider, Geocoder, LocationProvider

PHOTO_SUFFIXES = {".jpg", ".jpeg", ".png", ".heic", ".webp"}


@dataclass
class FixedLocationProvider(LocationProvider):
    """Reports a configured device position."""

    latitude: float | None
    longitude: float | None
    geocoder: Geocoder | None = None

    async def request_permission(self) -> bool:
        """Fixed positions need no permission."""
        return True

    async def get_current_coordinates(self) -> Coordinates:
        """Return the configured position."""
        if self.latitude is None or self.longitude is None:
            raise DeviceUnavailableError("No device position is configured")
        return Coordinates(latitude=self.latitude, longitude=self.longitude)

    async def reverse_geocode(
        self, latitude: float, longitude: float
    ) -> Address | None:
        """Delegate to the geocoder when one is configured."""
        if self.geocoder is None:
            return None
        return await self.geocoder.reverse(latitude, longitude)


@dataclass
class InboxCameraProvider(CameraProvider):
    """Takes the newest image dropped into an inbox directory."""

    inbox_dir: Path
    library_dir: Path

    async def request_permission(self) -> bool:
        """Access is granted when the inbox directory exists."""
        return self.inbox_dir.is_dir()

    async def capture_photo(self) -> str | None:
        """Move the newest inbox image into the library and return its path."""
        return await asyncio.to_thread(self._capture)

    def _capture(self) -> str | None:
        if not self.inbox_dir.is_dir():
            raise DeviceUnavailableError(f"Camera inbox {self.inbox_dir} is missing")
        candidates = [
            path
            for path in self.inbox_dir.iterdir()
            if path.is_file() and path.suffix.lower() in PHOTO_SUFFIXES
        ]
        if not candidates:
            return None
        newest = max(candidates, key=lambda path: path.stat().st_mtime)
        self.library_dir.mkdir(parents=True, exist_ok=True)
        target = _unique_target(self.library_dir, newest.name)
        shutil.move(str(newest), target)
        return str(target.resolve())


def _unique_target(directory: Path, name: str) -> Path:
    target = directory / name
    counter = 1
    while target.exists():
        target = directory / f"{Path(name).stem}-{counter}{Path(name).suffix}"
        counter += 1
    return target
