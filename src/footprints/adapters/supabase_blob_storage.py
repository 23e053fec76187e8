"""Supabase-backed key/value storage for named units."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from footprints.services.records import BlobStorage


@dataclass
class SupabaseBlobStorage(BlobStorage):
    """Supabase implementation storing one row per named unit."""

    client: Client
    table: str = "kv_store"

    async def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        return await asyncio.to_thread(self._get, key)

    async def set_item(self, key: str, value: str) -> None:
        """Upsert the value for a key."""
        await asyncio.to_thread(self._set, key, value)

    def _get(self, key: str) -> str | None:
        response = (
            self.client.table(self.table)
            .select("key, value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0]["value"]

    def _set(self, key: str, value: str) -> None:
        response = (
            self.client.table(self.table)
            .upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to store {key}")
