"""Storage — namespaced persistence over a pluggable string key-value medium."""

from inputdefense.storage.backends import JsonFileBackend, MemoryBackend, StorageBackend
from inputdefense.storage.secure_store import SecureStore

__all__ = ["JsonFileBackend", "MemoryBackend", "SecureStore", "StorageBackend"]
