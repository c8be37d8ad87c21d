"""
Pydantic models that mirror the gestion-sports ``loadCourtDispo`` response.

The endpoint returns a JSON array with one object per court.
"""

from __future__ import annotations

from pydantic import BaseModel, RootModel


class DurationOption(BaseModel):
    duration: int | None = None  # minutes
    price: float | str | None = None


class HourAvailability(BaseModel):
    hourStart: str | None = None  # "HH:MM"
    duration: list[DurationOption] = []


class CourtAvailability(BaseModel):
    idCourt: int | str | None = None
    name: str | None = None
    heuresDispo: list[HourAvailability] = []


class CourtDispoResponse(RootModel[list[CourtAvailability]]):
    pass
