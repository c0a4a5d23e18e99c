"""In-process TTL cache for discovery listings and shortcut metadata."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from services.action.shortcut_gate.domain import CacheStats

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """One cached value with its creation time and lifetime in seconds."""

    value: T
    created_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.created_at < self.ttl


class TTLCache:
    """Key/value store with per-entry expiry.

    Stale entries are treated as misses on read but are not swept; the next
    ``set`` for the same key replaces them.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry[object]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> object | None:
        """Return the cached value for ``key`` or ``None`` on a miss."""
        entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock()):
            self._misses += 1
            return None
        self._hits += 1
        return entry.value

    def set(self, key: str, value: object, ttl: float) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds."""
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._entries[key] = CacheEntry(value=value, created_at=self._clock(), ttl=ttl)

    def invalidate_all(self) -> None:
        """Drop every entry and reset hit/miss counters."""
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> CacheStats:
        total = self._hits + self._misses
        return CacheStats(
            size=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            hit_rate=self._hits / total if total else 0.0,
        )
