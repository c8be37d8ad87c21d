"""
Country Club Padel adapter – openresa day planning fetched over plain HTTP
with cookies obtained from a browser login.
"""

from __future__ import annotations

from datetime import date

from app.models import UNSPECIFIED, SessionRecord, Slot
from app.services.club_adapter import AuthenticatedClubAdapter
from app.services.countryclubpadel.client import CountryClubPadelClient, ParsedSlot
from app.services.countryclubpadel.config import CLUB_ID, FALLBACK_COURT, TIMEOUT_SECONDS
from app.services.normalization import HourRange, dedupe_slots, filter_hours, make_slot, sort_by_time
from app.services.session_store import SessionStore


class CountryClubPadelService(AuthenticatedClubAdapter):
    club_id = CLUB_ID
    timeout = TIMEOUT_SECONDS

    def __init__(self, client: CountryClubPadelClient, store: SessionStore, **kwargs) -> None:
        super().__init__(store, **kwargs)
        self._client = client

    async def close(self) -> None:
        await self._client.close()

    async def _fetch_with_session(
        self,
        record: SessionRecord,
        day: date,
        hours: HourRange | None,
    ) -> list[Slot]:
        parsed = await self._client.fetch_day(record, day)
        return self.build_slots(parsed, day, hours)

    @staticmethod
    def build_slots(parsed: list[ParsedSlot], day: date, hours: HourRange | None) -> list[Slot]:
        slots = dedupe_slots(
            make_slot(
                day=day,
                time=p.time,
                court=p.court,
                court_type=UNSPECIFIED,
                duration_minutes=p.duration_minutes,
                price=p.price,
                reservation_link=p.link,
                fallback_court=FALLBACK_COURT,
            )
            for p in parsed
        )
        return sort_by_time(filter_hours(slots, hours))
