"""
In-memory TTL cache with an injectable clock.

One instance is created per process (or per tracker) and passed in
explicitly. Tests pass a fake clock to step time forward.
"""

from collections.abc import Callable
from dataclasses import dataclass
import time
from typing import Any


@dataclass
class _Entry:
    value: Any
    expires_at: float


class TTLCache:
    """
    Key → value cache whose entries expire after a per-entry TTL.

    Args:
        default_ttl_s: TTL used when set() is called without one
        clock: Monotonic seconds source; defaults to time.monotonic
    """

    def __init__(
        self,
        default_ttl_s: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if default_ttl_s <= 0:
            raise ValueError("default_ttl_s must be positive")
        self.default_ttl_s = default_ttl_s
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or default if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return default
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return default
        return entry.value

    def set(self, key: str, value: Any, ttl_s: float | None = None) -> None:
        ttl = self.default_ttl_s if ttl_s is None else ttl_s
        self._entries[key] = _Entry(value, self._clock() + ttl)

    def invalidate(self, key: str | None = None) -> None:
        """Drop one key, or every key when key is None."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def get_or_load(
        self,
        key: str,
        loader: Callable[[], Any],
        ttl_s: float | None = None,
    ) -> Any:
        """
        Return the cached value, calling loader to fill a miss.

        A None result from loader is cached too, so a missing plan is not
        re-read from storage on every call within the TTL.
        """
        sentinel = object()
        value = self.get(key, sentinel)
        if value is sentinel:
            value = loader()
            self.set(key, value, ttl_s)
        return value
