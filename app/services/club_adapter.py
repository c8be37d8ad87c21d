"""
Interface for padel club booking-site integrations.

Every club integration implements this protocol so the rest of the
application (aggregator, health checker, routers) is decoupled from the
underlying booking system, its markup and its authentication scheme.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import Protocol

from app.clubs import get_club
from app.models import ClubDescriptor, SessionRecord, Slot
from app.services.errors import AuthenticationError, UpstreamError
from app.services.normalization import HourRange
from app.services.session_store import SessionState, SessionStore
from app.services.ttl_cache import TTLCache, cache_key

logger = logging.getLogger(__name__)

# Narrow window queried by test_connection (tomorrow, early afternoon).
_PROBE_HOURS = HourRange(14, 15)


class ClubAdapter(Protocol):
    """Protocol that every club integration must satisfy."""

    club_id: str

    async def fetch_slots(self, day: date, hours: HourRange | None = None) -> list[Slot]:
        """
        Return the free slots for *day*, optionally restricted to *hours*.

        An empty list means "no availability"; infrastructure problems
        (network, authentication, unexpected payloads) raise.
        """
        ...

    async def test_connection(self) -> bool:
        """Run a minimal uncached query; True when it completed without error."""
        ...

    async def close(self) -> None:
        ...


class BaseClubAdapter(ABC):
    """
    Shared plumbing: per-adapter TTL cache, timeout and connection probe.

    Subclasses implement ``_fetch`` and return already normalised,
    deduplicated slots.
    """

    club_id: str
    # Upper bound for one uncached fetch (seconds).
    timeout: float = 30.0

    def __init__(
        self,
        *,
        cache: TTLCache[list[Slot]] | None = None,
        timeout: float | None = None,
    ) -> None:
        self._cache: TTLCache[list[Slot]] = cache if cache is not None else TTLCache()
        if timeout is not None:
            self.timeout = timeout

    @property
    def club(self) -> ClubDescriptor:
        club = get_club(self.club_id)
        if club is None:
            raise LookupError(f"No club descriptor for {self.club_id}")
        return club

    # ── ClubAdapter protocol ───────────────────────────────────────────

    async def fetch_slots(self, day: date, hours: HourRange | None = None) -> list[Slot]:
        key = cache_key(self.club_id, day, hours)
        cached = self._cache.get(key)
        if cached is not None:
            return list(cached)

        slots = await self._fetch_with_timeout(day, hours)
        self._cache.set(key, slots)
        logger.info("%s: %d slots for %s (%s)", self.club_id, len(slots), day, hours or "all day")
        return list(slots)

    async def test_connection(self) -> bool:
        day = date.today() + timedelta(days=1)
        try:
            await self._fetch_with_timeout(day, _PROBE_HOURS)
        except Exception as exc:
            logger.warning("%s connection test failed: %s", self.club_id, exc)
            return False
        return True

    async def close(self) -> None:
        pass

    # ── Internals ──────────────────────────────────────────────────────

    async def _fetch_with_timeout(self, day: date, hours: HourRange | None) -> list[Slot]:
        try:
            return await asyncio.wait_for(self._fetch(day, hours), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise UpstreamError(self.club_id, f"timed out after {self.timeout:.0f}s") from exc

    @abstractmethod
    async def _fetch(self, day: date, hours: HourRange | None) -> list[Slot]:
        raise NotImplementedError


class AuthenticatedClubAdapter(BaseClubAdapter):
    """
    Adapter for clubs whose booking data sits behind a login.

    A rejected session triggers exactly one refresh + retry within the same
    call.  A store left in FAILED state is not retried from user traffic;
    the scheduled session check is responsible for recovering it.
    """

    def __init__(self, store: SessionStore, **kwargs) -> None:
        super().__init__(**kwargs)
        self._store = store

    @property
    def session_store(self) -> SessionStore:
        return self._store

    async def refresh_session(self) -> SessionRecord:
        return await self._store.refresh()

    async def _fetch(self, day: date, hours: HourRange | None) -> list[Slot]:
        record = await self._current_session()
        try:
            return await self._fetch_with_session(record, day, hours)
        except AuthenticationError:
            logger.warning("%s rejected the session, refreshing once", self.club_id)
            self._store.invalidate()
            record = await self._store.refresh()
            return await self._fetch_with_session(record, day, hours)

    async def _current_session(self) -> SessionRecord:
        record = await self._store.get_valid()
        if record is not None:
            return record
        if self._store.state is SessionState.FAILED:
            raise AuthenticationError(self.club_id, "no valid session (last refresh failed)")
        return await self._store.refresh()

    @abstractmethod
    async def _fetch_with_session(
        self,
        record: SessionRecord,
        day: date,
        hours: HourRange | None,
    ) -> list[Slot]:
        raise NotImplementedError
