"""
Pydantic models for the JSON flavour of openresa's ``/reservation/day``.
"""

from __future__ import annotations

from pydantic import BaseModel


class DaySlot(BaseModel):
    id: int | str | None = None
    available: bool = False
    time: str | None = None
    startTime: str | None = None
    court: str | None = None
    courtName: str | None = None
    price: float | str | None = None
    duration: int | str | None = None


class DayResponse(BaseModel):
    slots: list[DaySlot] = []
