"""
Complexe Padel adapter – one Amelia query per court, run concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from app.models import Slot
from app.services.club_adapter import BaseClubAdapter
from app.services.complexepadel.client import ComplexePadelClient
from app.services.complexepadel.config import (
    CLUB_ID,
    MAX_RESULTS,
    RESERVATION_URL,
    SERVICES,
    SLOT_DURATION_SECONDS,
    TIMEOUT_SECONDS,
    CourtService,
)
from app.services.normalization import HourRange, dedupe_slots, filter_hours, make_slot

logger = logging.getLogger(__name__)


class ComplexePadelService(BaseClubAdapter):
    club_id = CLUB_ID
    timeout = TIMEOUT_SECONDS

    def __init__(self, client: ComplexePadelClient, **kwargs) -> None:
        super().__init__(**kwargs)
        self._client = client

    async def close(self) -> None:
        await self._client.close()

    async def _fetch(self, day: date, hours: HourRange | None) -> list[Slot]:
        results = await asyncio.gather(
            *(self._client.fetch_free_times(service, day) for service in SERVICES),
            return_exceptions=True,
        )

        slots: list[Slot] = []
        failures: list[BaseException] = []
        for service, result in zip(SERVICES, results):
            if isinstance(result, BaseException):
                logger.warning("Complexe Padel service %s failed: %s", service.name, result)
                failures.append(result)
                continue
            slots.extend(s for s in (self._to_slot(service, day, t) for t in result) if s is not None)

        # One court failing is tolerable; all of them failing is an outage.
        if failures and len(failures) == len(SERVICES):
            raise failures[0]

        slots = filter_hours(dedupe_slots(slots), hours)
        slots.sort(key=lambda s: (s.date, s.time))
        return slots[:MAX_RESULTS]

    @staticmethod
    def _to_slot(service: CourtService, day: date, time: str) -> Slot | None:
        return make_slot(
            day=day,
            time=time,
            court=service.name,
            court_type=service.court_type,
            duration_minutes=SLOT_DURATION_SECONDS // 60,
            price=service.price,
            reservation_link=RESERVATION_URL.format(
                service_id=service.service_id,
                date=day.isoformat(),
                time=time,
            ),
        )
