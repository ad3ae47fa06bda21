"""Tests for the JSON file store."""

from pathlib import Path

import pytest

from pantry_coach.adapters.json_file_store import JsonFileStore
from pantry_coach.services.storage import StorageError


def test_load_missing_key_returns_none(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "data")

    assert store.load("profile") is None


def test_save_then_load(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "data")

    store.save("inventory", [{"id": "item_1"}])

    assert store.load("inventory") == [{"id": "item_1"}]
    assert not (tmp_path / "data" / "inventory.json.tmp").exists()


def test_corrupt_file_raises_storage_error(tmp_path: Path) -> None:
    (tmp_path / "history.json").write_text("{not json", encoding="utf-8")
    store = JsonFileStore(tmp_path)

    with pytest.raises(StorageError):
        store.load("history")


def test_remove_ignores_missing_key(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    store.save("profile", {"user_id": "u"})

    store.remove("profile")
    store.remove("profile")

    assert store.load("profile") is None


def test_unserializable_value_raises_storage_error(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)

    with pytest.raises(StorageError):
        store.save("profile", {"bad": object()})
