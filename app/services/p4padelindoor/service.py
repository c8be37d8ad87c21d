"""
P4 Padel Indoor adapter.

Availability is only exposed per start time, so one POST is sent for every
half hour of the requested window (``HH:00`` and ``HH:30``, except the
half hour after the last hour).  Requests are spread over several member
accounts by ``AccountRotation``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from app.models import SessionRecord, Slot
from app.services.account_rotation import Account, AccountRotation
from app.services.club_adapter import BaseClubAdapter
from app.services.errors import AuthenticationError, UpstreamError
from app.services.normalization import HourRange, dedupe_slots, filter_hours, make_slot, sort_by_time
from app.services.p4padelindoor.client import P4Client, ParsedSlot
from app.services.p4padelindoor.config import (
    CLOSING_HOUR,
    CLUB_ID,
    DEFAULT_COURT_TYPE,
    DEFAULT_HOUR_RANGE,
    OPENING_HOUR,
    REQUEST_TIMEOUT_SECONDS,
    RESERVATION_LINK,
    TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


def query_window(hours: HourRange | None) -> tuple[int, int]:
    """Clamp the requested hours to the club's opening hours."""
    if hours is None:
        return OPENING_HOUR, CLOSING_HOUR
    return max(OPENING_HOUR, hours.start_hour), min(CLOSING_HOUR, hours.end_hour)


def query_times(start_hour: int, end_hour: int) -> list[str]:
    times: list[str] = []
    for hour in range(start_hour, end_hour + 1):
        times.append(f"{hour:02d}:00")
        if hour < end_hour:
            times.append(f"{hour:02d}:30")
    return times


class P4PadelIndoorService(BaseClubAdapter):
    club_id = CLUB_ID
    timeout = TIMEOUT_SECONDS

    def __init__(self, client: P4Client, rotation: AccountRotation, **kwargs) -> None:
        super().__init__(**kwargs)
        self._client = client
        self._rotation = rotation

    @property
    def rotation(self) -> AccountRotation:
        return self._rotation

    async def close(self) -> None:
        await self._client.close()

    async def fetch_around(self, day: date, hour: int, hour_range: int = DEFAULT_HOUR_RANGE) -> list[Slot]:
        """Slots within *hour_range* hours either side of *hour*."""
        window = HourRange(max(0, hour - hour_range), min(23, hour + hour_range))
        return await self.fetch_slots(day, window)

    async def _fetch(self, day: date, hours: HourRange | None) -> list[Slot]:
        start, end = query_window(hours)
        if start > end:
            return []
        times = query_times(start, end)

        # A rejected account is parked and the next one gets a single try.
        for attempt in range(2):
            acquired = await self._rotation.acquire()
            if acquired is None:
                raise AuthenticationError(CLUB_ID, "no account with a valid session")
            account, record = acquired
            try:
                parsed = await self._query_all(account, record, day, times)
            except AuthenticationError:
                self._rotation.mark_unusable(account)
                if attempt == 1:
                    raise
                continue
            break

        slots = dedupe_slots(
            make_slot(
                day=day,
                time=p.start_time,
                court=p.court,
                court_type=DEFAULT_COURT_TYPE,
                duration_minutes=p.duration_minutes,
                price=p.price,
                reservation_link=RESERVATION_LINK,
            )
            for p in parsed
        )
        return sort_by_time(filter_hours(slots, HourRange(start, end)))

    async def _query_all(
        self,
        account: Account,
        record: SessionRecord,
        day: date,
        times: list[str],
    ) -> list[ParsedSlot]:
        results = await asyncio.gather(
            *(
                asyncio.wait_for(self._client.load_court_dispo(record, day, t), REQUEST_TIMEOUT_SECONDS)
                for t in times
            ),
            return_exceptions=True,
        )

        parsed: list[ParsedSlot] = []
        auth_errors = 0
        other_errors: list[BaseException] = []
        for time, result in zip(times, results):
            if isinstance(result, AuthenticationError):
                auth_errors += 1
            elif isinstance(result, BaseException):
                logger.debug("P4 query %s on %s failed: %s", time, day, result)
                other_errors.append(result)
            else:
                parsed.extend(result)

        if auth_errors == len(times):
            raise AuthenticationError(CLUB_ID, f"every request rejected for {account.label}")
        if len(other_errors) + auth_errors == len(times):
            raise UpstreamError(CLUB_ID, f"all {len(times)} availability requests failed")
        if other_errors or auth_errors:
            logger.warning(
                "P4: %d/%d availability requests failed for %s",
                len(other_errors) + auth_errors,
                len(times),
                day,
            )
        return parsed
