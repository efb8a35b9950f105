"""In-memory TTL cache for settings values."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_TTL_MS = 5 * 60 * 1000


def _now_ms() -> float:
    return time.time() * 1000


@dataclass
class CachedSetting:
    """A cached value together with the moment it was stored."""

    value: Any
    timestamp: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl


class SettingsCache:
    """Process-local cache keyed by setting name.

    Expired entries are evicted lazily when read. Two callers missing the same
    key at once will both fetch it; the values are identical so the duplicate
    request is harmless.
    """

    def __init__(
        self,
        default_ttl_ms: float = DEFAULT_TTL_MS,
        *,
        clock: Callable[[], float] = _now_ms,
    ) -> None:
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock
        self._entries: dict[str, CachedSetting] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value for ``key`` or ``None`` on miss/expiry."""

        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl_ms: float | None = None) -> None:
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        self._entries[key] = CachedSetting(value=value, timestamp=self._clock(), ttl=ttl)

    def invalidate(self, key: str | None = None) -> None:
        """Drop ``key``, or every entry when no key is given."""

        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CachedSetting", "DEFAULT_TTL_MS", "SettingsCache"]
