"""
In-memory TTL cache for adapter results.

Every adapter owns one ``TTLCache``.  Entries are replaced wholesale on each
fresh fetch and are never updated in place; an entry is either entirely
valid or discarded.  The TTL is a function of wall-clock time so that peak
booking hours get fresher data than the middle of the night.

Usage::

    cache: TTLCache[list[Slot]] = TTLCache()
    key = cache_key("padeltwins", day, hours)
    slots = cache.get(key)
    if slots is None:
        slots = await fetch()
        cache.set(key, slots)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Generic, TypeVar

from app.config import (
    CACHE_OFFPEAK_TTL_SECONDS,
    CACHE_PEAK_END_HOUR,
    CACHE_PEAK_START_HOUR,
    CACHE_PEAK_TTL_SECONDS,
)
from app.services.normalization import HourRange

logger = logging.getLogger(__name__)

V = TypeVar("V")


def time_of_day_ttl(now: datetime) -> float:
    """120 s during booking hours (07:00–23:00), 300 s overnight by default."""
    if CACHE_PEAK_START_HOUR <= now.hour < CACHE_PEAK_END_HOUR:
        return CACHE_PEAK_TTL_SECONDS
    return CACHE_OFFPEAK_TTL_SECONDS


def fixed_ttl(seconds: float) -> Callable[[datetime], float]:
    return lambda _now: seconds


def cache_key(
    club_id: str,
    day: date,
    hours: HourRange | None = None,
    min_time: str | None = None,
) -> str:
    """Compose a key from every parameter that changes the result."""
    parts = [club_id, day.isoformat()]
    if hours is not None:
        parts.append(str(hours))
    if min_time:
        parts.append(f">={min_time}")
    return "_".join(parts)


@dataclass(frozen=True)
class _Entry(Generic[V]):
    value: V
    timestamp: float


class TTLCache(Generic[V]):
    """
    Process-local cache with a time-of-day dependent TTL.

    ``clock`` is a monotonic seconds source used for entry ages and
    ``wall_clock`` supplies the local time used to pick the TTL; both are
    injectable for tests.
    """

    def __init__(
        self,
        ttl: Callable[[datetime], float] = time_of_day_ttl,
        *,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._wall_clock = wall_clock
        self._entries: dict[str, _Entry[V]] = {}

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, key: str) -> V | None:
        self.cleanup()
        entry = self._entries.get(key)
        if entry is None:
            return None
        logger.debug("Cache hit for %s", key)
        return entry.value

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    # ── Write ──────────────────────────────────────────────────────────

    def set(self, key: str, value: V) -> None:
        """Store *value*, replacing any previous entry for *key*."""
        self._entries[key] = _Entry(value=value, timestamp=self._clock())
        self.cleanup()

    def cleanup(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        expired = [key for key, entry in self._entries.items() if not self._is_fresh(entry)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Cache cleanup removed %d expired entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    # ── Internals ──────────────────────────────────────────────────────

    def _is_fresh(self, entry: _Entry[V]) -> bool:
        ttl = self._ttl(self._wall_clock())
        return self._clock() - entry.timestamp < ttl
