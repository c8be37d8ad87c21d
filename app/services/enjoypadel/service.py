from __future__ import annotations

from datetime import date

from app.models import Slot
from app.services.club_adapter import BaseClubAdapter
from app.services.enjoypadel.client import EnjoyPadelClient, ParsedSlot
from app.services.enjoypadel.config import (
    CLUB_ID,
    COURT_NAMES,
    DEFAULT_COURT_TYPE,
    RESERVATION_LINK,
    SLOT_DURATION_MINUTES,
    TIMEOUT_SECONDS,
)
from app.services.normalization import (
    HourRange,
    dedupe_slots,
    filter_hours,
    make_slot,
    sort_by_time,
    to_french_date,
)


class EnjoyPadelService(BaseClubAdapter):
    club_id = CLUB_ID
    timeout = TIMEOUT_SECONDS

    def __init__(self, client: EnjoyPadelClient, **kwargs) -> None:
        super().__init__(**kwargs)
        self._client = client

    async def close(self) -> None:
        await self._client.close()

    async def _fetch(self, day: date, hours: HourRange | None) -> list[Slot]:
        html = await self._client.fetch_calendar(day, SLOT_DURATION_MINUTES)
        return self.build_slots(EnjoyPadelClient.parse_calendar_html(html), day, hours)

    @staticmethod
    def build_slots(parsed: list[ParsedSlot], day: date, hours: HourRange | None) -> list[Slot]:
        expected = to_french_date(day)
        slots = dedupe_slots(
            make_slot(
                day=day,
                time=p.time,
                court=COURT_NAMES.get(court_id, f"Terrain {court_id}"),
                court_type=DEFAULT_COURT_TYPE,
                duration_minutes=SLOT_DURATION_MINUTES,
                reservation_link=RESERVATION_LINK,
            )
            for p in parsed
            if p.date == expected
            for court_id in p.court_ids
        )
        return sort_by_time(filter_hours(slots, hours))
