"""Supabase implementation of the key-value store."""

from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from pantry_coach.services.storage import KeyValueStore, StorageError


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Supabase-backed store keeping one JSON row per key."""

    client: Client
    table_name: str = "pantry_state"

    def load(self, key: str) -> object | None:
        """Return the stored value for a key, if present."""
        try:
            response = (
                self.client.table(self.table_name)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(f"Failed to load {key}") from exc
        if not response.data:
            return None
        return response.data[0].get("value")

    def save(self, key: str, value: object) -> None:
        """Insert or replace the row for a key."""
        try:
            self.client.table(self.table_name).upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            ).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(f"Failed to save {key}") from exc

    def remove(self, key: str) -> None:
        """Delete the row for a key."""
        try:
            self.client.table(self.table_name).delete().eq("key", key).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(f"Failed to remove {key}") from exc
