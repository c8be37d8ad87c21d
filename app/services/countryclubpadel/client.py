from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date

import httpx
from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from app.models import SessionRecord
from app.services import openresa
from app.services.countryclubpadel.api_models import DayResponse
from app.services.countryclubpadel.config import (
    BOOK_URL,
    CLUB_ID,
    COURT_RE,
    DAY_URL,
    DEFAULT_HEADERS,
    FALLBACK_SLOT_SELECTOR,
    FREE_SLOT_SELECTOR,
    PRICE_RE,
    REQUEST_TIMEOUT_SECONDS,
    RESERVATION_LINK,
    SLOT_ID_RE,
    TIME_RE,
)
from app.services.errors import AuthenticationError, UpstreamError
from app.services.normalization import DEFAULT_DURATION_MINUTES, parse_time, to_us_date

logger = logging.getLogger(__name__)


@dataclass
class ParsedSlot:
    time: str | None
    court: str | None
    price: float | str = 0
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    link: str = RESERVATION_LINK


def _text(tag: Tag | None) -> str:
    if tag is None:
        return ""
    return " ".join(tag.get_text(" ", strip=True).split())


def _duration_minutes(raw: int | str | None) -> int:
    """Openresa reports durations either as minutes or as ``1h30``-style strings."""
    if isinstance(raw, int):
        return raw if raw > 0 else DEFAULT_DURATION_MINUTES
    if isinstance(raw, str):
        if raw.strip().isdigit():
            return int(raw) or DEFAULT_DURATION_MINUTES
        parsed = parse_time(raw)
        if parsed is not None and parsed != (0, 0):
            return parsed[0] * 60 + parsed[1]
    return DEFAULT_DURATION_MINUTES


class CountryClubPadelClient:
    """Fetches openresa's day planning with the stored session cookies."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT_SECONDS) -> None:
        self._client = httpx.AsyncClient(headers=DEFAULT_HEADERS, timeout=timeout, follow_redirects=True)

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_day(self, record: SessionRecord, day: date) -> list[ParsedSlot]:
        params = {
            "date": to_us_date(day),
            "group": 0,
            "_": int(time.time() * 1000),
        }
        try:
            resp = await self._client.get(DAY_URL, params=params, headers={"Cookie": record.cookie_header()})
        except httpx.HTTPError as exc:
            raise UpstreamError(CLUB_ID, f"day planning request failed: {exc}") from exc

        if resp.status_code in (401, 403):
            raise AuthenticationError(CLUB_ID, f"day planning returned HTTP {resp.status_code}")
        if resp.status_code >= 400:
            raise UpstreamError(CLUB_ID, f"day planning returned HTTP {resp.status_code}")

        if "application/json" in resp.headers.get("content-type", ""):
            try:
                return self.parse_day_json(DayResponse.model_validate(resp.json()))
            except (ValueError, ValidationError) as exc:
                raise UpstreamError(CLUB_ID, f"unexpected day payload: {exc}") from exc
        return self.parse_day_html(resp.text)

    # ── Parsing ────────────────────────────────────────────────────────

    @staticmethod
    def parse_day_json(payload: DayResponse) -> list[ParsedSlot]:
        parsed: list[ParsedSlot] = []
        for slot in payload.slots:
            if not slot.available:
                continue
            link = BOOK_URL.format(slot_id=slot.id) if slot.id is not None else RESERVATION_LINK
            parsed.append(
                ParsedSlot(
                    time=slot.time or slot.startTime,
                    court=slot.court or slot.courtName,
                    price=slot.price if slot.price is not None else 0,
                    duration_minutes=_duration_minutes(slot.duration),
                    link=link,
                )
            )
        return parsed

    @staticmethod
    def parse_day_html(html: str) -> list[ParsedSlot]:
        soup = BeautifulSoup(html, "html.parser")
        if openresa.is_login_page(soup):
            raise AuthenticationError(CLUB_ID, "openresa served the login form")
        if soup.select_one(".reservation-container-wrapper") is None:
            logger.warning("Country Club Padel: no reservation container in day planning")
            return []

        courts = court_mapping(soup)
        anchors = soup.select(FREE_SLOT_SELECTOR) or soup.select(FALLBACK_SLOT_SELECTOR)
        return [_parse_anchor(anchor, courts) for anchor in anchors]


def court_mapping(soup: BeautifulSoup) -> dict[str, str]:
    """Map openresa schedule ids to the court name shown in each column header."""
    mapping: dict[str, str] = {}
    for container in soup.select(".schedule-container"):
        name = _text(container.select_one(".media-body.full-show.text-ellipsis"))
        first = container.select_one("table.schedule-table-slots a.slot")
        if name and first is not None and first.get("data-schedule"):
            mapping[first["data-schedule"]] = name
    return mapping


def _parse_anchor(anchor: Tag, courts: dict[str, str]) -> ParsedSlot:
    text = _text(anchor)
    return ParsedSlot(
        time=_anchor_time(anchor, text),
        court=_anchor_court(anchor, courts, text),
        price=_anchor_price(anchor, text),
        link=_anchor_link(anchor),
    )


def _anchor_time(anchor: Tag, text: str) -> str | None:
    if anchor.get("data-time"):
        return anchor["data-time"]
    label = _text(anchor.select_one(".time, .slot-time"))
    if label:
        return label
    match = TIME_RE.search(text)
    if match:
        return match.group(0)
    return openresa.slot_time(anchor)


def _anchor_court(anchor: Tag, courts: dict[str, str], text: str) -> str | None:
    schedule_id = anchor.get("data-schedule")
    if schedule_id and schedule_id in courts:
        return courts[schedule_id]
    if anchor.get("data-court"):
        return anchor["data-court"]
    label = _text(anchor.select_one(".court, .slot-court"))
    if label:
        return label
    match = COURT_RE.search(text)
    return match.group(1).strip() if match else None


def _anchor_price(anchor: Tag, text: str) -> float | str:
    label = _text(anchor.select_one(".price, .slot-price"))
    if label:
        return label
    match = PRICE_RE.search(text)
    return f"{match.group(1)} €" if match else 0


def _anchor_link(anchor: Tag) -> str:
    match = SLOT_ID_RE.search(anchor.get("href") or "")
    return BOOK_URL.format(slot_id=match.group(1)) if match else RESERVATION_LINK
