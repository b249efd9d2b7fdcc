"""Local durable key-value cache for daily records."""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from dayledger.domain.errors import LocalWriteFailure

KEY_PREFIX = "inventory_"


def cache_key(inventory_date) -> str:
    """Return the cache key for a date, e.g. ``inventory_2024-03-15``."""
    return f"{KEY_PREFIX}{inventory_date.isoformat()}"


class LocalCache(ABC):
    """Synchronous key-value store holding JSON-serializable dicts.

    ``set`` raises LocalWriteFailure when the value cannot be stored.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[dict[str, Any]]:
        """Return the stored value or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: dict[str, Any]) -> None:
        """Store a value durably."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """Return every stored key."""
        pass


class MemoryCache(LocalCache):
    """In-process cache. Values are round-tripped through JSON like on disk."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[dict[str, Any]]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: dict[str, Any]) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise LocalWriteFailure(f"Cannot store {key}: {e}") from e

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileCache(LocalCache):
    """One JSON file per key inside a directory.

    Writes go to a temporary file that is then renamed over the target, so
    a crash never leaves a half-written record.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[dict[str, Any]]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def set(self, key: str, value: dict[str, Any]) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_path, self._path(key))
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise LocalWriteFailure(f"Cannot store {key}: {e}") from e

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(path.stem for path in self.directory.glob("*.json"))
