"""Random identifiers and anti-forgery tokens."""

from __future__ import annotations

import base64
import binascii
import hmac
import json
import logging
import secrets
import string
import time
from typing import Callable, Optional

from inputdefense.storage.secure_store import SecureStore

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits

TOKEN_STORAGE_KEY = "anti_forgery_token"


def generate_secure_id(length: int = 16) -> str:
    """Return an alphanumeric identifier drawn from a CSPRNG."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def _encode(data: dict) -> str:
    return base64.b64encode(json.dumps(data).encode("utf-8")).decode("ascii")


def _decode(token: str) -> dict:
    data = json.loads(base64.b64decode(token.encode("ascii"), validate=True).decode("utf-8"))
    if not isinstance(data, dict):
        raise ValueError("token payload is not an object")
    return data


class AntiForgeryTokens:
    """Issue and check a per-session anti-forgery token.

    The token lives in the same client-controlled store, so this only
    catches accidental cross-session reuse, not a hostile client.
    """

    def __init__(
        self,
        store: SecureStore,
        ttl_seconds: int = 300,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._store = store
        self._ttl_ms = ttl_seconds * 1000
        self._clock = clock or (lambda: int(time.time() * 1000))

    def issue(self) -> str:
        """Create a new token, remember it, and return it."""
        payload = _encode({"token": generate_secure_id(32), "timestamp": self._clock()})
        self._store.set(TOKEN_STORAGE_KEY, payload, encode=True)
        return payload

    def validate(self, token: str) -> bool:
        stored = self._store.get(TOKEN_STORAGE_KEY, decode=True)
        if not stored or not isinstance(token, str):
            return False
        try:
            stored_data = _decode(stored)
            token_data = _decode(token)
            age = self._clock() - int(token_data["timestamp"])
            same = hmac.compare_digest(str(stored_data["token"]), str(token_data["token"]))
        except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
            logger.debug(f"Rejecting malformed anti-forgery token: {e}")
            return False
        return same and 0 <= age < self._ttl_ms
