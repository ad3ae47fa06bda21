"""Local JSON file implementation of the key-value store."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pantry_coach.services.storage import KeyValueStore, StorageError

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStore(KeyValueStore):
    """Stores each key as ``<key>.json`` inside a data directory."""

    directory: Path

    def load(self, key: str) -> object | None:
        """Return the decoded value for a key, or None on first run."""
        path = self._path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"Failed to read {key}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            _logger.warning("Corrupt JSON in %s", path)
            raise StorageError(f"Stored {key} data is not valid JSON") from exc

    def save(self, key: str, value: object) -> None:
        """Write a value atomically by replacing the file."""
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(value), encoding="utf-8")
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Failed to write {key}") from exc

    def remove(self, key: str) -> None:
        """Delete the file for a key if it exists."""
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to remove {key}") from exc

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"
