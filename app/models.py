"""Pydantic models for the Padel Slot Finder API.

Field names are snake_case in Python and camelCase on the wire so the JSON
shape matches what existing frontends consume (``endTime``, ``courtType``,
``reservationLink`` …).
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CourtType = Literal["intérieur", "extérieur", "mixte", "non spécifié"]

INDOOR: CourtType = "intérieur"
OUTDOOR: CourtType = "extérieur"
MIXED: CourtType = "mixte"
UNSPECIFIED: CourtType = "non spécifié"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Slots ──────────────────────────────────────────────────────────────────


class ReservationInfo(_CamelModel):
    """Form data for openresa's booking switch (POST *request_url* with *request_data*)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    request_url: str
    request_data: str
    schedule_id: str
    timestart: int = Field(..., description="Start as minutes since midnight")
    duration: int
    day_offset: int = Field(..., description="Days from today to the slot date")


class Slot(_CamelModel):
    """One bookable court-time unit at one club, as produced by an adapter."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="Slot date (YYYY-MM-DD)")
    time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="Start time (HH:MM)")
    end_time: str | None = Field(None, description="Start time + duration (HH:MM, wraps at midnight)")
    duration_minutes: int = Field(90, gt=0)
    court: str = Field(..., min_length=1)
    court_type: CourtType = UNSPECIFIED
    price: float | str = 0
    reservation_link: str = ""
    reservation_info: ReservationInfo | None = None
    available: bool = True

    @property
    def hour(self) -> int:
        return int(self.time[:2])

    @property
    def minute(self) -> int:
        return int(self.time[3:5])


class Coordinates(_CamelModel):
    latitude: float
    longitude: float


class EnrichedSlot(Slot):
    """A slot after the aggregator attached the owning club's metadata."""

    club_id: str
    club_name: str
    distance: float = Field(..., description="Distance from the search point in km (1 decimal)")
    address: str
    coordinates: Coordinates
    type: CourtType = UNSPECIFIED


# ── Clubs ──────────────────────────────────────────────────────────────────


class ClubDescriptor(_CamelModel):
    """Static club metadata; loaded once at import time, never mutated."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    latitude: float
    longitude: float
    address: str
    type: CourtType
    court_type: CourtType


class ClubListResponse(_CamelModel):
    items: list[ClubDescriptor]
    count: int


# ── Sessions ───────────────────────────────────────────────────────────────


class CookieRecord(BaseModel):
    """A browser cookie; ``expires`` is epoch seconds or -1 for session cookies."""

    name: str
    value: str
    expires: float = -1
    domain: str | None = None
    path: str | None = None

    @property
    def is_session_cookie(self) -> bool:
        return self.expires is None or self.expires <= 0


class SessionRecord(_CamelModel):
    """Persisted authentication material for one club or account.

    Unknown fields in the file are ignored so that newer writers stay readable.
    """

    cookies: list[CookieRecord] = Field(default_factory=list)
    expires_at: int = Field(..., description="Epoch milliseconds")
    created_at: int = Field(default_factory=lambda: int(time.time() * 1000))

    def cookie_header(self) -> str:
        return "; ".join(f"{c.name}={c.value}" for c in self.cookies)

    def cookie_dict(self) -> dict[str, str]:
        return {c.name: c.value for c in self.cookies}


class SessionStatus(_CamelModel):
    key: str
    state: str
    expires_at: datetime | None = None


# ── Search ─────────────────────────────────────────────────────────────────


class SearchResponse(_CamelModel):
    date: str
    start_hour: int
    end_hour: int
    latitude: float
    longitude: float
    radius: float
    count: int
    slots: list[EnrichedSlot]


class P4SlotsRequest(_CamelModel):
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    hour: int = Field(..., ge=0, le=23)


class P4SlotsResponse(_CamelModel):
    date: str
    hour: int
    count: int
    slots: list[Slot]


# ── Health ─────────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
    adapters: int = 0


class ClubHealth(_CamelModel):
    club_id: str
    working: bool | None = None
    last_check: datetime | None = None
    error_count: int = 0


class ErrorResponse(BaseModel):
    error: str
    field: str | None = None
    message: str
