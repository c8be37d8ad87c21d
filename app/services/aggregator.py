"""
Cross-club availability search.

Given a point, a radius, a date and an hour window the aggregator:

1. keeps the clubs within the radius (great-circle distance);
2. queries their adapters concurrently, a failing club contributing nothing;
3. drops slots outside the hour window and, for today, slots already started;
4. attaches club metadata and the distance to each slot;
5. sorts by start time, then distance.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol

from app.clubs import CLUBS
from app.models import UNSPECIFIED, ClubDescriptor, Coordinates, EnrichedSlot, Slot
from app.services.club_adapter import ClubAdapter
from app.services.errors import SearchValidationError
from app.services.normalization import HourRange

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class AdapterLookup(Protocol):
    def get(self, club_id: str) -> ClubAdapter | None:
        ...


@dataclass(frozen=True)
class SearchParams:
    day: date
    hours: HourRange
    latitude: float
    longitude: float
    radius: float


# ── Validation ─────────────────────────────────────────────────────────────


def _parse_int(field: str, value: Any) -> int:
    if value is None or value == "":
        raise SearchValidationError(field, "is required")
    if isinstance(value, bool):
        raise SearchValidationError(field, f"must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not re.fullmatch(r"-?\d+", text):
        raise SearchValidationError(field, f"must be an integer, got {value!r}")
    return int(text)


def _parse_float(field: str, value: Any) -> float:
    if value is None or value == "":
        raise SearchValidationError(field, "is required")
    if isinstance(value, bool):
        raise SearchValidationError(field, f"must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise SearchValidationError(field, f"must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise SearchValidationError(field, f"must be a finite number, got {value!r}")
    return number


def validate_search_params(
    date: Any,
    start_hour: Any,
    end_hour: Any,
    latitude: Any,
    longitude: Any,
    radius: Any,
) -> SearchParams:
    """
    Check and convert raw search input.

    Raises ``SearchValidationError`` naming the first offending field; this
    happens before any club is queried.
    """
    if not date or not isinstance(date, str) or not _DATE_RE.match(date):
        raise SearchValidationError("date", "must be formatted YYYY-MM-DD")
    try:
        day = datetime.strptime(date, "%Y-%m-%d").date()
    except ValueError:
        raise SearchValidationError("date", f"{date} is not a calendar date") from None

    start = _parse_int("startHour", start_hour)
    end = _parse_int("endHour", end_hour)
    if not 0 <= start <= 23:
        raise SearchValidationError("startHour", "must be between 0 and 23")
    if not 0 <= end <= 23:
        raise SearchValidationError("endHour", "must be between 0 and 23")
    if start > end:
        raise SearchValidationError("endHour", "must not be before startHour")

    lat = _parse_float("latitude", latitude)
    lon = _parse_float("longitude", longitude)
    km = _parse_float("radius", radius)
    if not -90 <= lat <= 90:
        raise SearchValidationError("latitude", "must be between -90 and 90")
    if not -180 <= lon <= 180:
        raise SearchValidationError("longitude", "must be between -180 and 180")
    if km < 0:
        raise SearchValidationError("radius", "must not be negative")

    return SearchParams(day=day, hours=HourRange(start, end), latitude=lat, longitude=lon, radius=km)


# ── Geography ──────────────────────────────────────────────────────────────


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def clubs_within(
    latitude: float,
    longitude: float,
    radius: float,
    clubs: Iterable[ClubDescriptor] = CLUBS,
) -> list[tuple[ClubDescriptor, float]]:
    """Clubs no further than *radius* km away, with their distance."""
    selected: list[tuple[ClubDescriptor, float]] = []
    for club in clubs:
        distance = haversine_km(latitude, longitude, club.latitude, club.longitude)
        if distance <= radius:
            selected.append((club, distance))
    return selected


# ── Search ─────────────────────────────────────────────────────────────────


class Aggregator:
    def __init__(
        self,
        adapters: AdapterLookup,
        *,
        clubs: Sequence[ClubDescriptor] = CLUBS,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._adapters = adapters
        self._clubs = clubs
        self._clock = clock

    async def search(
        self,
        date: Any,
        start_hour: Any,
        end_hour: Any,
        latitude: Any,
        longitude: Any,
        radius: Any,
    ) -> list[EnrichedSlot]:
        params = validate_search_params(date, start_hour, end_hour, latitude, longitude, radius)
        return await self.search_validated(params)

    async def search_validated(self, params: SearchParams) -> list[EnrichedSlot]:
        in_range = clubs_within(params.latitude, params.longitude, params.radius, self._clubs)
        logger.info(
            "Search %s %s within %.1f km of (%.4f, %.4f): %d clubs in range",
            params.day,
            params.hours,
            params.radius,
            params.latitude,
            params.longitude,
            len(in_range),
        )

        targets: list[tuple[ClubDescriptor, float, ClubAdapter]] = []
        for club, distance in in_range:
            adapter = self._adapters.get(club.id)
            if adapter is None:
                logger.debug("No adapter registered for %s, skipped", club.id)
                continue
            targets.append((club, distance, adapter))

        results = await asyncio.gather(
            *(self._fetch_club(adapter, club, params) for club, _, adapter in targets)
        )

        now = self._clock()
        cutoff = (now.hour, now.minute) if params.day == now.date() else None

        enriched: list[EnrichedSlot] = []
        for (club, distance, _), slots in zip(targets, results):
            for slot in slots:
                if not params.hours.contains(slot.hour):
                    continue
                if cutoff is not None and (slot.hour, slot.minute) <= cutoff:
                    continue
                enriched.append(enrich_slot(slot, club, distance))

        enriched.sort(key=lambda s: (s.hour, s.minute, s.distance))
        logger.info("Search %s returned %d slots", params.day, len(enriched))
        return enriched

    async def _fetch_club(
        self,
        adapter: ClubAdapter,
        club: ClubDescriptor,
        params: SearchParams,
    ) -> list[Slot]:
        try:
            return await adapter.fetch_slots(params.day, params.hours)
        except Exception:
            logger.exception("Fetching %s failed, no slots from this club", club.id)
            return []


def enrich_slot(slot: Slot, club: ClubDescriptor, distance: float) -> EnrichedSlot:
    """Attach club identity, location and distance to *slot*."""
    court_type = slot.court_type if slot.court_type != UNSPECIFIED else club.court_type
    return EnrichedSlot(
        **slot.model_dump(exclude={"court_type"}),
        court_type=court_type,
        type=court_type,
        club_id=club.id,
        club_name=club.name,
        distance=round(distance, 1),
        address=club.address,
        coordinates=Coordinates(latitude=club.latitude, longitude=club.longitude),
    )
