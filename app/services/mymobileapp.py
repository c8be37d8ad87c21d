"""
Shared HTTP client for clubs on the mymobileapp.fr booking platform.

Each club has its own sub-domain exposing ``loadcalendrier_capsule.asp``,
which returns an HTML fragment of buttons (one per free start time) for a
date, a duration and a sport.  Markup differs per club, so parsing lives in
the club packages.
"""

from __future__ import annotations

import logging
from datetime import date

import httpx

from app.services.errors import UpstreamError
from app.services.normalization import DEFAULT_DURATION_MINUTES, to_french_date

logger = logging.getLogger(__name__)

CALENDAR_PATH = "/loadcalendrier_capsule.asp"
PADEL_SPORT_ID = "2"

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 18_5 like Mac OS X) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) Mobile/15E148"
    ),
    "Accept": "text/html, */*; q=0.01",
    "Accept-Language": "fr-FR,fr;q=0.9",
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
}


class MyMobileAppClient:
    def __init__(self, club_id: str, base_url: str, timeout: float = 10.0) -> None:
        self.club_id = club_id
        self.base_url = base_url
        self._client = httpx.AsyncClient(headers=DEFAULT_HEADERS, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_calendar(self, day: date, duration_minutes: int = DEFAULT_DURATION_MINUTES) -> str:
        form = {
            "myDate": to_french_date(day),
            "duree": str(duration_minutes),
            "id_sport": PADEL_SPORT_ID,
        }
        logger.debug("mymobileapp calendar request: %s %s", self.base_url, form)
        try:
            resp = await self._client.post(f"{self.base_url}{CALENDAR_PATH}", data=form)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise UpstreamError(self.club_id, f"calendar request failed: {exc}") from exc
        return resp.text
