from __future__ import annotations

from datetime import date

from app.models import Slot
from app.services.club_adapter import BaseClubAdapter
from app.services.normalization import HourRange, dedupe_slots, filter_hours, make_slot, sort_by_time
from app.services.padeltwins.client import PadelTwinsClient, ParsedSlot
from app.services.padeltwins.config import (
    CLUB_ID,
    DEFAULT_COURT_TYPE,
    RESERVATION_LINK,
    SLOT_DURATION_MINUTES,
    TIMEOUT_SECONDS,
)


class PadelTwinsService(BaseClubAdapter):
    club_id = CLUB_ID
    timeout = TIMEOUT_SECONDS

    def __init__(self, client: PadelTwinsClient, **kwargs) -> None:
        super().__init__(**kwargs)
        self._client = client

    async def close(self) -> None:
        await self._client.close()

    async def _fetch(self, day: date, hours: HourRange | None) -> list[Slot]:
        html = await self._client.fetch_calendar(day, SLOT_DURATION_MINUTES)
        return self.build_slots(PadelTwinsClient.parse_calendar_html(html), day, hours)

    @staticmethod
    def build_slots(parsed: list[ParsedSlot], day: date, hours: HourRange | None) -> list[Slot]:
        # The calendar only says "N courts free", so expand into Terrain 1..N.
        slots = dedupe_slots(
            make_slot(
                day=day,
                time=p.time,
                court=f"Terrain {n}",
                court_type=DEFAULT_COURT_TYPE,
                duration_minutes=SLOT_DURATION_MINUTES,
                price=f"{p.price}€" if p.price is not None else 0,
                reservation_link=RESERVATION_LINK,
            )
            for p in parsed
            for n in range(1, p.free_courts + 1)
        )
        return sort_by_time(filter_hours(slots, hours))
