"""Durable key-value storage - the local storage the client writes to."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote

from anecdote.errors import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """String key-value store. Writes may fail with PersistenceError."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return stored value or None if missing."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value. Raises PersistenceError on quota or backend failure."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...


def _entry_size(key: str, value: str) -> int:
    return len(key.encode()) + len(value.encode())


class MemoryKeyValueStore(KeyValueStore):
    """In-process store with an optional byte quota."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self._quota = quota_bytes

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._quota is not None:
            used = sum(_entry_size(k, v) for k, v in self._data.items() if k != key)
            if used + _entry_size(key, value) > self._quota:
                raise PersistenceError(f"Storage quota exceeded writing {key!r}")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileKeyValueStore(KeyValueStore):
    """File-based store. One JSON file per key under data_dir/storage."""

    def __init__(self, data_dir: Path, quota_bytes: int | None = None) -> None:
        self._dir = Path(data_dir) / "storage"
        self._dir.mkdir(parents=True, exist_ok=True)
        self._quota = quota_bytes

    def _path(self, key: str) -> Path:
        safe = quote(key, safe="")
        return self._dir / f"{safe}.json"

    def _used_bytes(self, exclude: Path) -> int:
        return sum(p.stat().st_size for p in self._dir.glob("*.json") if p != exclude)

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with path.open(encoding="utf-8") as f:
                record = json.load(f)
            return record.get("value")
        except (json.JSONDecodeError, OSError, AttributeError) as e:
            logger.warning("Could not load %s: %s", path, e)
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        payload = json.dumps({"key": key, "value": value})
        if self._quota is not None:
            if self._used_bytes(path) + len(payload.encode()) > self._quota:
                raise PersistenceError(f"Storage quota exceeded writing {key!r}")
        try:
            with path.open("w", encoding="utf-8") as f:
                f.write(payload)
        except OSError as e:
            raise PersistenceError(f"Could not save {path}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            logger.error("Could not delete %s: %s", key, e)
