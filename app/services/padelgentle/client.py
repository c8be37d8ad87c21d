from __future__ import annotations

import logging
from datetime import date

import httpx
from bs4 import BeautifulSoup

from app.services import openresa
from app.services.errors import UpstreamError
from app.services.normalization import to_french_date
from app.services.padelgentle.config import (
    CLUB_ID,
    DEFAULT_HEADERS,
    FREE_SLOT_SELECTORS,
    NO_RESULTS_SELECTOR,
    TIME_CORRECTIONS,
    UNKNOWN_COURT,
    WIDGET_ID,
    WIDGET_KEY,
    WIDGET_URL,
)

logger = logging.getLogger(__name__)

_REPEATED_COURT_MARKER = "COURT N°"


class PadelGentleClient:
    def __init__(self, timeout: float = 10.0) -> None:
        self._client = httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=timeout,
            follow_redirects=True,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_widget(self, day: date | None = None) -> str:
        params = {"widget": "1", "id": WIDGET_ID, "key": WIDGET_KEY}
        if day is not None:
            params["date"] = to_french_date(day)
        try:
            resp = await self._client.get(WIDGET_URL, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise UpstreamError(CLUB_ID, f"widget request failed: {exc}") from exc
        return resp.text

    @staticmethod
    def parse_widget_html(html: str) -> list[openresa.ParsedSlot]:
        soup = BeautifulSoup(html, "html.parser")
        if soup.select_one(NO_RESULTS_SELECTOR) is not None:
            return []
        parsed = openresa.parse_schedule(
            soup,
            free_selectors=FREE_SLOT_SELECTORS,
            default_court=UNKNOWN_COURT,
        )
        for slot in parsed:
            slot.court = _clean_court_name(slot.court)
            if slot.time is not None:
                slot.time = TIME_CORRECTIONS.get(slot.time, slot.time)
        return parsed


def _clean_court_name(name: str) -> str:
    """The header sometimes renders twice ("COURT N°1COURT N°1"); keep one copy."""
    start = name.find(_REPEATED_COURT_MARKER)
    if start == -1 or len(name) <= 10:
        return name
    return name[: start + len(_REPEATED_COURT_MARKER) + 1].strip()
