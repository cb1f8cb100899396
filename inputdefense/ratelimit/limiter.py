"""Fixed-window rate limiter persisted in a storage backend."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from inputdefense.config import DEFAULT_CONFIG, SecurityConfig
from inputdefense.storage.backends import StorageBackend

logger = logging.getLogger(__name__)

KEY_PREFIX = "rate_limit_"

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class RateLimitWindow:
    """Requests counted so far in the window ending at ``reset_time`` (epoch ms)."""

    count: int
    reset_time: int


@dataclass
class RateLimitDecision:
    allowed: bool
    remaining_requests: int
    reset_time: int


class RateLimiter:
    """Count actions per key within fixed windows.

    A denied attempt does not count against the window. Updates are written
    with compare-and-set and retried on conflict, so callers sharing one
    backend never double-count or lose a reset.
    """

    def __init__(
        self,
        backend: StorageBackend,
        config: Optional[SecurityConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._backend = backend
        self._config = (config or DEFAULT_CONFIG).rate_limiting
        self._clock = clock or wall_clock_ms

    @property
    def max_requests(self) -> int:
        return self._config.max_requests

    @property
    def window_ms(self) -> int:
        return self._config.window_ms

    # -- persistence ---------------------------------------------------------

    @staticmethod
    def _storage_key(key: str) -> str:
        return f"{KEY_PREFIX}{key}"

    def _parse(self, key: str, raw: Optional[str]) -> Optional[RateLimitWindow]:
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            return RateLimitWindow(count=int(data["count"]), reset_time=int(data["reset_time"]))
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Discarding corrupt rate limit window for '{key}': {e}")
            return None

    def _current(self, key: str, raw: Optional[str], now: int) -> RateLimitWindow:
        window = self._parse(key, raw)
        if window is None or now > window.reset_time:
            return RateLimitWindow(count=0, reset_time=now + self.window_ms)
        return window

    # -- public API ----------------------------------------------------------

    def check(self, key: str) -> RateLimitDecision:
        """Count one attempt for *key* and report whether it is allowed."""
        storage_key = self._storage_key(key)
        window = RateLimitWindow(count=0, reset_time=0)

        for _ in range(max(1, self._config.max_write_retries)):
            now = self._clock()
            try:
                raw = self._backend.get(storage_key)
            except OSError as e:
                logger.error(f"Rate limit read failed for '{key}': {e}")
                raw = None
            window = self._current(key, raw, now)

            if window.count >= self.max_requests:
                return RateLimitDecision(
                    allowed=False, remaining_requests=0, reset_time=window.reset_time
                )

            updated = RateLimitWindow(count=window.count + 1, reset_time=window.reset_time)
            try:
                written = self._backend.compare_and_set(
                    storage_key, raw, json.dumps(asdict(updated))
                )
            except OSError as e:
                logger.error(f"Rate limit write failed for '{key}': {e}")
                written = False
            if written:
                return RateLimitDecision(
                    allowed=True,
                    remaining_requests=self.max_requests - updated.count,
                    reset_time=updated.reset_time,
                )
            logger.debug(f"Rate limit window for '{key}' changed underneath us, retrying")

        logger.warning(f"Rate limit for '{key}' could not be updated, denying attempt")
        return RateLimitDecision(allowed=False, remaining_requests=0, reset_time=window.reset_time)

    def window(self, key: str) -> Optional[RateLimitWindow]:
        """Return the stored window for *key* without counting an attempt."""
        return self._parse(key, self._backend.get(self._storage_key(key)))

    def reset(self, key: str) -> None:
        """Forget the window for *key*."""
        self._backend.remove(self._storage_key(key))
