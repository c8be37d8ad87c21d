from __future__ import annotations

import logging
from datetime import date

from app.models import Slot
from app.services.club_adapter import BaseClubAdapter
from app.services.normalization import HourRange, dedupe_slots, filter_hours, make_slot, sort_by_time
from app.services.openresa import ParsedSlot
from app.services.padelgentle.client import PadelGentleClient
from app.services.padelgentle.config import CLUB_ID, DEFAULT_COURT_TYPE, RESERVATION_LINK, TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class PadelGentleService(BaseClubAdapter):
    club_id = CLUB_ID
    timeout = TIMEOUT_SECONDS

    def __init__(self, client: PadelGentleClient, **kwargs) -> None:
        super().__init__(**kwargs)
        self._client = client

    async def close(self) -> None:
        await self._client.close()

    async def _fetch(self, day: date, hours: HourRange | None) -> list[Slot]:
        html = await self._client.fetch_widget(day)
        return self.build_slots(PadelGentleClient.parse_widget_html(html), day, hours)

    async def test_connection(self) -> bool:
        try:
            await self._client.fetch_widget()
        except Exception as exc:
            logger.warning("%s connection test failed: %s", self.club_id, exc)
            return False
        return True

    @staticmethod
    def build_slots(parsed: list[ParsedSlot], day: date, hours: HourRange | None) -> list[Slot]:
        slots = dedupe_slots(
            make_slot(
                day=day,
                time=p.time,
                court=p.court,
                court_type=DEFAULT_COURT_TYPE,
                duration_minutes=p.duration_minutes,
                reservation_link=RESERVATION_LINK,
            )
            for p in parsed
        )
        return sort_by_time(filter_hours(slots, hours))
