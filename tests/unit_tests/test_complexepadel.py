from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest

from app.models import INDOOR, OUTDOOR
from app.services.complexepadel.api_models import SlotsResponse
from app.services.complexepadel.client import ComplexePadelClient
from app.services.complexepadel.config import MAX_RESULTS, SERVICES
from app.services.complexepadel.service import ComplexePadelService
from app.services.errors import UpstreamError
from app.services.normalization import HourRange
from tests.mocks.models import MOCK_DAY

NESTED_PAYLOAD = {
    "message": "Successfully retrieved slots",
    "data": {
        "slots": {
            "2026-06-15": {
                "09:00": [[6, None]],
                "10:30": [],
                "18:00": [[6, None], [6, 1]],
            },
            "2026-06-16": {"09:00": [[6, None]]},
        }
    },
}

FLAT_PAYLOAD = {"slots": {"2026-06-15": {"20:00": [[5, None]]}}}


def _times_by_service(mapping: dict[int, list[str] | Exception]):
    async def _fetch(service, day: date):
        result = mapping.get(service.service_id, [])
        if isinstance(result, Exception):
            raise result
        return result

    return _fetch


class TestComplexePadelParsing:
    def test_free_times_nested(self):
        payload = SlotsResponse.model_validate(NESTED_PAYLOAD)
        assert ComplexePadelClient.free_times(payload, MOCK_DAY) == ["09:00", "18:00"]

    def test_free_times_flat(self):
        payload = SlotsResponse.model_validate(FLAT_PAYLOAD)
        assert ComplexePadelClient.free_times(payload, MOCK_DAY) == ["20:00"]

    def test_free_times_other_day(self):
        payload = SlotsResponse.model_validate(NESTED_PAYLOAD)
        assert ComplexePadelClient.free_times(payload, date(2026, 6, 20)) == []


class TestComplexePadelService:
    def _service(self, mapping) -> tuple[ComplexePadelService, AsyncMock]:
        client = AsyncMock(spec=ComplexePadelClient)
        client.fetch_free_times = AsyncMock(side_effect=_times_by_service(mapping))
        return ComplexePadelService(client), client

    async def test_one_query_per_court(self):
        service, client = self._service({8: ["18:00"], 9: ["18:00", "19:30"]})
        slots = await service.fetch_slots(MOCK_DAY)

        assert client.fetch_free_times.await_count == len(SERVICES)
        assert [(s.time, s.court) for s in slots] == [
            ("18:00", "Terrain vert"),
            ("18:00", "Chiquita"),
            ("19:30", "Chiquita"),
        ]

    async def test_price_and_type_per_court(self):
        service, _ = self._service({8: ["18:00"], 9: ["18:00"]})
        slots = {s.court: s for s in await service.fetch_slots(MOCK_DAY)}

        assert slots["Terrain vert"].court_type == OUTDOOR
        assert slots["Terrain vert"].price == 12
        assert slots["Chiquita"].court_type == INDOOR
        assert slots["Chiquita"].price == 14
        assert slots["Chiquita"].end_time == "19:30"
        assert "service=9" in slots["Chiquita"].reservation_link
        assert "date=2026-06-15" in slots["Chiquita"].reservation_link

    async def test_hour_filter(self):
        service, _ = self._service({8: ["08:00", "12:00", "21:00"]})
        slots = await service.fetch_slots(MOCK_DAY, HourRange(10, 20))
        assert [s.time for s in slots] == ["12:00"]

    async def test_partial_failure_is_tolerated(self):
        service, _ = self._service({8: UpstreamError("complexepadel", "500"), 10: ["09:00"]})
        slots = await service.fetch_slots(MOCK_DAY)
        assert [s.court for s in slots] == ["Viboja"]

    async def test_total_failure_raises(self):
        error = UpstreamError("complexepadel", "down")
        service, _ = self._service({s.service_id: error for s in SERVICES})
        with pytest.raises(UpstreamError):
            await service.fetch_slots(MOCK_DAY)

    async def test_results_are_capped(self):
        times = [f"{h:02d}:{m:02d}" for h in range(8, 23) for m in (0, 30)]
        service, _ = self._service({s.service_id: times for s in SERVICES})
        slots = await service.fetch_slots(MOCK_DAY)

        assert len(slots) == MAX_RESULTS
        assert slots[0].time == "08:00"
        assert [s.time for s in slots] == sorted(s.time for s in slots)
