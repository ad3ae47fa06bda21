"""Key-value storage contract and codecs for persisted datasets."""

from dataclasses import asdict
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from pantry_coach.domain.history import DietaryHistoryEntry
from pantry_coach.domain.inventory import InventoryItem
from pantry_coach.domain.profile import UserProfile

PROFILE_KEY = "profile"
INVENTORY_KEY = "inventory"
HISTORY_KEY = "history"

_PROFILE_ADAPTER = TypeAdapter(UserProfile)
_INVENTORY_ADAPTER = TypeAdapter(list[InventoryItem])
_HISTORY_ADAPTER = TypeAdapter(list[DietaryHistoryEntry])


class StorageError(Exception):
    """Raised when stored data cannot be read, decoded, or written."""


class KeyValueStore(Protocol):
    """Persistence interface for independently stored datasets."""

    def load(self, key: str) -> object | None:
        """Return the JSON-compatible value for a key, or None if absent."""

    def save(self, key: str, value: object) -> None:
        """Store a JSON-compatible value under a key."""

    def remove(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""


def decode_profile(raw: object) -> UserProfile:
    """Validate a stored profile payload."""
    try:
        return _PROFILE_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise StorageError("Stored profile data is corrupt") from exc


def encode_profile(profile: UserProfile) -> object:
    """Return a JSON-compatible profile payload."""
    return _PROFILE_ADAPTER.dump_python(profile, mode="json")


def decode_inventory(raw: object) -> list[InventoryItem]:
    """Validate a stored inventory payload."""
    try:
        return _INVENTORY_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise StorageError("Stored inventory data is corrupt") from exc


def validate_inventory(items: list[InventoryItem]) -> list[InventoryItem]:
    """Check items built in code against the field constraints.

    Returns normalized copies; raises ``ValidationError`` on a bad item so it
    never reaches the store.
    """
    return _INVENTORY_ADAPTER.validate_python([asdict(item) for item in items])


def encode_inventory(items: list[InventoryItem]) -> object:
    """Return a JSON-compatible inventory payload."""
    return _INVENTORY_ADAPTER.dump_python(items, mode="json")


def decode_history(raw: object) -> list[DietaryHistoryEntry]:
    """Validate a stored history payload."""
    try:
        return _HISTORY_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise StorageError("Stored history data is corrupt") from exc


def encode_history(entries: list[DietaryHistoryEntry]) -> object:
    """Return a JSON-compatible history payload."""
    return _HISTORY_ADAPTER.dump_python(entries, mode="json")

