from __future__ import annotations

import math
from datetime import date, datetime

import pytest

from app.models import INDOOR, MIXED, OUTDOOR, UNSPECIFIED, ClubDescriptor, ReservationInfo
from app.services.aggregator import Aggregator, clubs_within, enrich_slot, haversine_km, validate_search_params
from app.services.errors import SearchValidationError
from tests.mocks.models import MOCK_DAY, make_slot
from tests.mocks.services import MockClubAdapter, failing_adapter

CLUB_A = ClubDescriptor(
    id="club-a",
    name="Club A",
    latitude=43.64,
    longitude=5.16,
    address="1 rue A",
    type=OUTDOOR,
    court_type=OUTDOOR,
)
CLUB_B = ClubDescriptor(
    id="club-b",
    name="Club B",
    latitude=43.50,
    longitude=5.40,
    address="2 rue B",
    type=MIXED,
    court_type=MIXED,
)
CLUBS = (CLUB_A, CLUB_B)

# A search day far from the injected "now" so the today cutoff does not apply.
OTHER_DAY_NOW = datetime(2026, 6, 1, 12, 0)


def _aggregator(adapters: dict, *, now: datetime = OTHER_DAY_NOW) -> Aggregator:
    return Aggregator(adapters, clubs=CLUBS, clock=lambda: now)


async def _search(aggregator: Aggregator, start: int = 0, end: int = 23, radius: float = 50):
    return await aggregator.search(MOCK_DAY.isoformat(), start, end, CLUB_A.latitude, CLUB_A.longitude, radius)


# ── Validation ─────────────────────────────────────────────────────────────


class TestValidation:
    def test_valid_input_is_converted(self):
        params = validate_search_params("2026-06-15", "18", "21", "43.5", "5.2", "10")
        assert params.day == date(2026, 6, 15)
        assert (params.hours.start_hour, params.hours.end_hour) == (18, 21)
        assert (params.latitude, params.longitude, params.radius) == (43.5, 5.2, 10.0)

    @pytest.mark.parametrize(
        "args, field",
        [
            (("15/06/2026", 18, 21, 43.5, 5.2, 10), "date"),
            (("2026-02-30", 18, 21, 43.5, 5.2, 10), "date"),
            ((None, 18, 21, 43.5, 5.2, 10), "date"),
            (("2026-06-15", None, 21, 43.5, 5.2, 10), "startHour"),
            (("2026-06-15", "six", 21, 43.5, 5.2, 10), "startHour"),
            (("2026-06-15", 24, 23, 43.5, 5.2, 10), "startHour"),
            (("2026-06-15", 18, 24, 43.5, 5.2, 10), "endHour"),
            (("2026-06-15", 21, 18, 43.5, 5.2, 10), "endHour"),
            (("2026-06-15", 18, 21, 91, 5.2, 10), "latitude"),
            (("2026-06-15", 18, 21, "abc", 5.2, 10), "latitude"),
            (("2026-06-15", 18, 21, 43.5, -181, 10), "longitude"),
            (("2026-06-15", 18, 21, 43.5, 5.2, -1), "radius"),
            (("2026-06-15", 18, 21, 43.5, 5.2, math.nan), "radius"),
            (("2026-06-15", 18, 21, 43.5, 5.2, "inf"), "radius"),
        ],
    )
    def test_rejected(self, args, field):
        with pytest.raises(SearchValidationError) as exc_info:
            validate_search_params(*args)
        assert exc_info.value.field == field

    async def test_invalid_search_queries_no_club(self):
        adapter = MockClubAdapter(CLUB_A.id)
        with pytest.raises(SearchValidationError):
            await _aggregator({CLUB_A.id: adapter}).search("2026-06-15", 22, 8, 43.6, 5.1, 10)
        assert adapter.calls == []


# ── Geography ──────────────────────────────────────────────────────────────


class TestGeography:
    def test_same_point(self):
        assert haversine_km(43.64, 5.16, 43.64, 5.16) == 0

    def test_known_distance(self):
        # Paris – Marseille
        assert haversine_km(48.8566, 2.3522, 43.2965, 5.3698) == pytest.approx(661, abs=5)

    def test_radius_selects_clubs(self):
        near = clubs_within(CLUB_A.latitude, CLUB_A.longitude, 5, CLUBS)
        assert [club.id for club, _ in near] == [CLUB_A.id]

        both = clubs_within(CLUB_A.latitude, CLUB_A.longitude, 50, CLUBS)
        assert [club.id for club, _ in both] == [CLUB_A.id, CLUB_B.id]
        assert 20 < both[1][1] < 30

    def test_zero_radius_keeps_club_at_the_point(self):
        assert [club.id for club, _ in clubs_within(CLUB_A.latitude, CLUB_A.longitude, 0, CLUBS)] == [CLUB_A.id]


# ── Search ─────────────────────────────────────────────────────────────────


class TestSearch:
    async def test_only_clubs_in_radius_are_queried(self):
        a = MockClubAdapter(CLUB_A.id, [make_slot("18:00")])
        b = MockClubAdapter(CLUB_B.id, [make_slot("18:00")])

        results = await _search(_aggregator({CLUB_A.id: a, CLUB_B.id: b}), radius=5)

        assert [s.club_id for s in results] == [CLUB_A.id]
        assert b.calls == []

    async def test_hour_filter(self):
        a = MockClubAdapter(CLUB_A.id, [make_slot("08:00"), make_slot("18:00"), make_slot("21:30"), make_slot("22:00")])
        results = await _search(_aggregator({CLUB_A.id: a}), 18, 21)
        assert [s.time for s in results] == ["18:00", "21:30"]

    async def test_requested_hours_are_passed_to_adapters(self):
        a = MockClubAdapter(CLUB_A.id, [])
        await _search(_aggregator({CLUB_A.id: a}), 18, 21)
        (day, hours), = a.calls
        assert day == MOCK_DAY
        assert (hours.start_hour, hours.end_hour) == (18, 21)

    async def test_today_drops_slots_already_started(self):
        a = MockClubAdapter(CLUB_A.id, [make_slot("17:30"), make_slot("18:00"), make_slot("18:30")])
        now = datetime(2026, 6, 15, 18, 0)
        results = await _search(_aggregator({CLUB_A.id: a}, now=now))
        assert [s.time for s in results] == ["18:30"]

    async def test_other_days_keep_every_slot(self):
        a = MockClubAdapter(CLUB_A.id, [make_slot("07:00"), make_slot("18:00")])
        now = datetime(2026, 6, 14, 23, 0)
        results = await _search(_aggregator({CLUB_A.id: a}, now=now))
        assert [s.time for s in results] == ["07:00", "18:00"]

    async def test_sorted_by_time_then_distance(self):
        a = MockClubAdapter(CLUB_A.id, [make_slot("19:00"), make_slot("18:00")])
        b = MockClubAdapter(CLUB_B.id, [make_slot("18:00"), make_slot("09:30")])

        results = await _search(_aggregator({CLUB_B.id: b, CLUB_A.id: a}))

        assert [(s.time, s.club_id) for s in results] == [
            ("09:30", CLUB_B.id),
            ("18:00", CLUB_A.id),
            ("18:00", CLUB_B.id),
            ("19:00", CLUB_A.id),
        ]

    async def test_failing_club_contributes_nothing(self, caplog):
        a = MockClubAdapter(CLUB_A.id, [make_slot("18:00")])
        results = await _search(_aggregator({CLUB_A.id: a, CLUB_B.id: failing_adapter(CLUB_B.id)}))

        assert [s.club_id for s in results] == [CLUB_A.id]
        assert "club-b" in caplog.text

    async def test_every_club_failing(self):
        adapters = {CLUB_A.id: failing_adapter(CLUB_A.id), CLUB_B.id: failing_adapter(CLUB_B.id)}
        assert await _search(_aggregator(adapters)) == []

    async def test_club_without_adapter_is_skipped(self):
        b = MockClubAdapter(CLUB_B.id, [make_slot("18:00")])
        results = await _search(_aggregator({CLUB_B.id: b}))
        assert [s.club_id for s in results] == [CLUB_B.id]

    async def test_enriched_fields(self):
        b = MockClubAdapter(CLUB_B.id, [make_slot("18:00", "Central", court_type=UNSPECIFIED)])
        (slot,) = await _search(_aggregator({CLUB_B.id: b}))

        assert slot.club_name == "Club B"
        assert slot.address == "2 rue B"
        assert slot.coordinates.latitude == CLUB_B.latitude
        assert slot.distance == round(slot.distance, 1)
        assert slot.court_type == MIXED
        assert slot.type == MIXED


class TestEnrichSlot:
    def test_keeps_known_court_type(self):
        enriched = enrich_slot(make_slot(court_type=INDOOR), CLUB_A, 3.14159)
        assert enriched.court_type == INDOOR
        assert enriched.type == INDOOR
        assert enriched.distance == 3.1

    def test_backfills_unspecified_court_type(self):
        enriched = enrich_slot(make_slot(court_type=UNSPECIFIED), CLUB_A, 0)
        assert enriched.court_type == OUTDOOR

    def test_wire_format_is_camel_case(self):
        payload = enrich_slot(make_slot(), CLUB_A, 1.0).model_dump(by_alias=True)
        assert {"endTime", "courtType", "reservationLink", "clubId", "clubName", "distance"} <= payload.keys()

    def test_booking_form_data_is_carried_through(self):
        info = ReservationInfo(
            request_url="https://openresa.com/reservation/switch",
            request_data="date=1&schedule=72534&timestart=1080&duration=90",
            schedule_id="72534",
            timestart=1080,
            duration=90,
            day_offset=1,
        )
        slot = make_slot().model_copy(update={"reservation_info": info})

        payload = enrich_slot(slot, CLUB_A, 1.0).model_dump(by_alias=True)

        assert payload["reservationInfo"]["requestData"] == "date=1&schedule=72534&timestart=1080&duration=90"
        assert enrich_slot(make_slot(), CLUB_A, 1.0).reservation_info is None
