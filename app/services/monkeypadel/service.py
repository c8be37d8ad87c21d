"""
Monkey Padel adapter – authenticated openresa planning rendered in a browser.
"""

from __future__ import annotations

from datetime import date

from app.models import SessionRecord, Slot
from app.services.club_adapter import AuthenticatedClubAdapter
from app.services.monkeypadel.client import MonkeyPadelClient, reservation_info, reservation_url
from app.services.monkeypadel.config import (
    CLUB_ID,
    COURT_TYPES,
    COURTS_BY_SCHEDULE_ID,
    TIMEOUT_SECONDS,
    UNKNOWN_COURT,
)
from app.services.normalization import (
    HourRange,
    court_type_for,
    dedupe_slots,
    filter_hours,
    make_slot,
    sort_by_time,
)
from app.services.session_store import SessionStore


class MonkeyPadelService(AuthenticatedClubAdapter):
    club_id = CLUB_ID
    timeout = TIMEOUT_SECONDS

    def __init__(self, client: MonkeyPadelClient, store: SessionStore, **kwargs) -> None:
        super().__init__(store, **kwargs)
        self._client = client

    async def _fetch_with_session(
        self,
        record: SessionRecord,
        day: date,
        hours: HourRange | None,
    ) -> list[Slot]:
        html = await self._client.fetch_schedule_html(record, day)
        return self.build_slots(MonkeyPadelClient.parse_schedule_html(html), day, hours)

    @staticmethod
    def build_slots(parsed, day: date, hours: HourRange | None, today: date | None = None) -> list[Slot]:
        link = reservation_url(day)
        today = today or date.today()
        slots = dedupe_slots(
            make_slot(
                day=day,
                time=p.time,
                court=_court_name(p),
                court_type=court_type_for(_court_name(p), COURT_TYPES),
                duration_minutes=p.duration_minutes,
                reservation_link=link,
            )
            for p in parsed
        )
        return [_with_reservation_info(s, day, today) for s in sort_by_time(filter_hours(slots, hours))]


def _with_reservation_info(slot: Slot, day: date, today: date) -> Slot:
    info = reservation_info(slot.court, slot.time, slot.duration_minutes, day, today)
    if info is None:
        return slot
    return slot.model_copy(update={"reservation_info": info})


def _court_name(parsed) -> str:
    """Header name, or the name known for the slot's schedule id when the header is missing."""
    if parsed.court == UNKNOWN_COURT and parsed.schedule_id:
        return COURTS_BY_SCHEDULE_ID.get(parsed.schedule_id, UNKNOWN_COURT)
    return parsed.court
