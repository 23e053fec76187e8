"""Record store owning the persisted footprint collection."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal, Protocol

from pydantic import ValidationError as PayloadValidationError

from footprints.domain.errors import StorageError
from footprints.domain.payloads import decode_records, encode_records
from footprints.domain.records import LocationRecord, RecordDraft, require_name

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "shareListData"

RecordField = Literal["name", "photo_ref"]


class BlobStorage(Protocol):
    """Persistence interface for named opaque units."""

    async def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    async def set_item(self, key: str, value: str) -> None:
        """Replace the stored value for a key."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class RecordStore:
    """Serialized read-modify-write access to the whole collection."""

    storage: BlobStorage
    key: str = DEFAULT_STORAGE_KEY
    clock: Callable[[], datetime] = _utcnow
    _records: list[LocationRecord] = field(default_factory=list, init=False)
    _last_issued_id: int = field(default=0, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    @property
    def records(self) -> list[LocationRecord]:
        """Return the last successfully loaded or written collection."""
        return list(self._records)

    async def load(self) -> list[LocationRecord]:
        """Load the collection, newest first."""
        async with self._lock:
            current = await self._read()
            self._records = current
            return list(current)

    async def create(self, draft: RecordDraft) -> list[LocationRecord]:
        """Create a record from a draft and prepend it to the collection."""
        name = require_name(draft.name)
        async with self._lock:
            current = await self._read()
            record = LocationRecord(
                id=self._next_id(current),
                coords=draft.coords,
                address=draft.address,
                name=name,
                photo_ref=draft.photo_ref,
                created_at=self.clock(),
            )
            updated = [record, *current]
            await self._write(updated)
            logger.info("Created footprint %s", record.id)
            return list(updated)

    async def delete(self, record_id: str) -> list[LocationRecord]:
        """Remove a record; unknown ids are a no-op."""
        async with self._lock:
            current = await self._read()
            updated = [record for record in current if record.id != record_id]
            if len(updated) == len(current):
                self._records = current
                return list(current)
            await self._write(updated)
            logger.info("Deleted footprint %s", record_id)
            return list(updated)

    async def update_field(
        self, record_id: str, field_name: RecordField, value: str | None
    ) -> list[LocationRecord]:
        """Replace a single mutable field of a record."""
        if field_name == "name":
            name = require_name(value or "")

            def apply(record: LocationRecord) -> LocationRecord:
                return record.with_name(name)

        elif field_name == "photo_ref":

            def apply(record: LocationRecord) -> LocationRecord:
                return record.with_photo_ref(value)

        else:
            raise ValueError(f"Unsupported record field: {field_name}")

        async with self._lock:
            current = await self._read()
            if not any(record.id == record_id for record in current):
                self._records = current
                return list(current)
            updated = [
                apply(record) if record.id == record_id else record
                for record in current
            ]
            await self._write(updated)
            logger.info("Updated %s of footprint %s", field_name, record_id)
            return list(updated)

    async def update_theme(self, record_id: str, theme: str) -> list[LocationRecord]:
        """Rename a record."""
        return await self.update_field(record_id, "name", theme)

    async def update_photo(
        self, record_id: str, photo_ref: str | None
    ) -> list[LocationRecord]:
        """Point a record at a different photo."""
        return await self.update_field(record_id, "photo_ref", photo_ref)

    async def _read(self) -> list[LocationRecord]:
        try:
            raw = await self.storage.get_item(self.key)
        except Exception as exc:
            logger.exception("Failed to read footprints from %s", self.key)
            raise StorageError("Failed to load footprints") from exc
        if raw is None:
            return []
        try:
            return decode_records(raw)
        except PayloadValidationError as exc:
            logger.exception("Stored footprints under %s are corrupt", self.key)
            raise StorageError("Stored footprints are corrupt") from exc

    async def _write(self, records: list[LocationRecord]) -> None:
        try:
            await self.storage.set_item(self.key, encode_records(records))
        except Exception as exc:
            logger.exception("Failed to write footprints to %s", self.key)
            raise StorageError("Failed to save footprints") from exc
        self._records = records

    def _next_id(self, current: list[LocationRecord]) -> str:
        """Issue a millisecond id strictly greater than any seen so far."""
        floor = self._last_issued_id
        for record in current:
            if record.id.isdecimal():
                floor = max(floor, int(record.id))
        now_ms = int(self.clock().timestamp() * 1000)
        issued = max(now_ms, floor + 1)
        self._last_issued_id = issued
        return str(issued)
