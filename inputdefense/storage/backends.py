"""Durable key-value media shared by the store and the rate limiter.

Values are plain strings, as in browser ``localStorage``. Every backend
also offers ``compare_and_set`` so read-modify-write callers can detect a
concurrent writer and retry.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """The storage medium: string keys to string values."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...

    def compare_and_set(self, key: str, expected: Optional[str], value: str) -> bool:
        """Write *value* only if the current value equals *expected*."""
        ...


class MemoryBackend:
    """Process-local storage. Thread-safe."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def compare_and_set(self, key: str, expected: Optional[str], value: str) -> bool:
        with self._lock:
            if self._data.get(key) != expected:
                return False
            self._data[key] = value
            return True


class JsonFileBackend:
    """Storage persisted as one JSON document, surviving process restarts.

    The file lives at ``<base_dir>/storage.json``. Writers inside one
    process are serialized; separate processes sharing the file are not
    coordinated and may overwrite each other's updates.
    """

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base = Path(base_dir) if base_dir else Path.home() / ".inputdefense"
        self._base.mkdir(parents=True, exist_ok=True)
        self._path = self._base / "storage.json"
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    # -- persistence ---------------------------------------------------------

    def _load_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Storage file {self._path} unreadable, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file {self._path} is not a JSON object, starting empty")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save_all(self, data: dict[str, str]) -> None:
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    # -- medium API ----------------------------------------------------------

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load_all()
            data[key] = value
            self._save_all(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load_all()
            if data.pop(key, None) is not None:
                self._save_all(data)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._load_all())

    def compare_and_set(self, key: str, expected: Optional[str], value: str) -> bool:
        with self._lock:
            data = self._load_all()
            if data.get(key) != expected:
                return False
            data[key] = value
            self._save_all(data)
            return True
