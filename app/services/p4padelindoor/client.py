from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

import httpx
from pydantic import ValidationError

from app.models import SessionRecord
from app.services.errors import AuthenticationError, UpstreamError
from app.services.normalization import to_french_date
from app.services.p4padelindoor.api_models import CourtDispoResponse
from app.services.p4padelindoor.config import (
    CLUB_ID,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_HEADERS,
    REQUEST_TIMEOUT_SECONDS,
    RESERVATION_URL,
    SPORT_ID,
)

logger = logging.getLogger(__name__)


@dataclass
class ParsedSlot:
    court: str
    start_time: str  # "HH:MM"
    duration_minutes: int
    price: float | str


class P4Client:
    """Async client for the gestion-sports availability endpoint."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT_SECONDS) -> None:
        self._client = httpx.AsyncClient(headers=DEFAULT_HEADERS, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def load_court_dispo(self, record: SessionRecord, day: date, hour: str) -> list[ParsedSlot]:
        """Free courts starting around *hour* (``HH:MM``) on *day*."""
        form = {
            "ajax": "loadCourtDispo",
            "hour": hour,
            "date": to_french_date(day),
            "idSport": SPORT_ID,
        }
        try:
            resp = await self._client.post(
                RESERVATION_URL,
                data=form,
                headers={"Cookie": record.cookie_header()},
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(CLUB_ID, f"loadCourtDispo {hour} failed: {exc}") from exc

        if resp.status_code in (401, 403) or self.is_login_page(resp.text):
            raise AuthenticationError(CLUB_ID, f"session rejected (status {resp.status_code})")
        if resp.status_code >= 400:
            raise UpstreamError(CLUB_ID, f"loadCourtDispo {hour} returned {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError:
            logger.warning("P4 returned a non-JSON body for %s %s", day, hour)
            return []
        return self.parse_courts(payload)

    @staticmethod
    def is_login_page(body: str) -> bool:
        return "<!DOCTYPE html>" in body[:500] or "<html" in body[:500].lower()

    @staticmethod
    def parse_courts(payload: object) -> list[ParsedSlot]:
        if not isinstance(payload, list):
            return []
        try:
            courts = CourtDispoResponse.model_validate(payload).root
        except ValidationError as exc:
            logger.warning("Unexpected P4 court payload: %s", exc)
            return []

        parsed: list[ParsedSlot] = []
        for index, court in enumerate(courts):
            label = court.idCourt if court.idCourt is not None else index + 1
            name = court.name or f"Court {label}"
            for hour in court.heuresDispo:
                if not hour.hourStart or not hour.duration:
                    continue
                option = hour.duration[0]
                parsed.append(
                    ParsedSlot(
                        court=name,
                        start_time=hour.hourStart,
                        duration_minutes=option.duration or DEFAULT_DURATION_MINUTES,
                        price=option.price or 0,
                    )
                )
        return parsed
