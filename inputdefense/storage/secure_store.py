"""Namespaced key-value store for feature-local persisted state.

The optional ``encode`` flag applies base64 on top of JSON. That is
obfuscation only and gives no confidentiality; a caller that needs secrecy
must put an authenticated cipher behind this same interface.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Optional

from inputdefense.storage.backends import StorageBackend

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "secure_"


class SecureStore:
    """Store serializable values under a namespace prefix.

    Nothing here raises to the caller: write failures are logged and
    dropped, read failures are logged and read as ``None``.
    """

    def __init__(self, backend: StorageBackend, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._backend = backend
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    def _physical_key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def set(self, key: str, value: Any, encode: bool = False) -> None:
        """Serialize and persist *value* under *key*."""
        try:
            data = json.dumps(value)
            if encode:
                data = base64.b64encode(data.encode("utf-8")).decode("ascii")
            self._backend.set(self._physical_key(key), data)
        except (TypeError, ValueError, OSError) as e:
            logger.error(f"Secure storage set error for '{key}': {e}")

    def get(self, key: str, decode: bool = False) -> Optional[Any]:
        """Return the stored value, or None when missing or unreadable."""
        try:
            data = self._backend.get(self._physical_key(key))
            if not data:
                return None
            if decode:
                data = base64.b64decode(data.encode("ascii"), validate=True).decode("utf-8")
            return json.loads(data)
        except (binascii.Error, UnicodeError, ValueError, OSError) as e:
            logger.warning(f"Secure storage get error for '{key}': {e}")
            return None

    def remove(self, key: str) -> None:
        try:
            self._backend.remove(self._physical_key(key))
        except OSError as e:
            logger.error(f"Secure storage remove error for '{key}': {e}")

    def clear_all(self) -> int:
        """Remove every entry under the namespace and return how many were removed."""
        removed = 0
        try:
            for physical in self._backend.keys():
                if physical.startswith(self._namespace):
                    self._backend.remove(physical)
                    removed += 1
        except OSError as e:
            logger.error(f"Secure storage clear error: {e}")
        return removed
