from __future__ import annotations

import logging
from datetime import date

from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from app.models import ReservationInfo, SessionRecord
from app.services import openresa
from app.services.browser import BrowserManager
from app.services.errors import AuthenticationError, UpstreamError
from app.services.monkeypadel.config import (
    CLUB_ID,
    FREE_SLOT_SELECTORS,
    FREE_SLOT_TIMEOUT_MS,
    RESERVATION_CONTAINER_TIMEOUT_MS,
    RESERVATION_URL,
    SCHEDULE_IDS,
    SWITCH_URL,
    UNKNOWN_COURT,
)
from app.services.normalization import to_french_date

logger = logging.getLogger(__name__)


def reservation_url(day: date) -> str:
    return RESERVATION_URL.format(date=to_french_date(day))


def reservation_info(
    court: str,
    time: str,
    duration_minutes: int,
    day: date,
    today: date,
) -> ReservationInfo | None:
    """
    Booking form data for one slot, or None when the court has no known schedule id.

    Openresa addresses the day relative to today rather than by calendar date.
    """
    schedule_id = SCHEDULE_IDS.get(court.strip())
    if schedule_id is None:
        return None
    hours, minutes = (int(part) for part in time.split(":"))
    timestart = hours * 60 + minutes
    offset = (day - today).days
    return ReservationInfo(
        request_url=SWITCH_URL,
        request_data=f"date={offset}&schedule={schedule_id}&timestart={timestart}&duration={duration_minutes}",
        schedule_id=schedule_id,
        timestart=timestart,
        duration=duration_minutes,
        day_offset=offset,
    )


class MonkeyPadelClient:
    """Renders the openresa planning with the stored session and scrapes it."""

    def __init__(self, browser: BrowserManager) -> None:
        self._browser = browser

    async def fetch_schedule_html(self, record: SessionRecord, day: date) -> str:
        url = reservation_url(day)
        async with self._browser.session(record.cookies, cookie_url=openresa.BASE_URL) as (_, page):
            try:
                await page.goto(url, wait_until="networkidle")
                try:
                    await page.wait_for_selector(
                        "#reservation-container",
                        timeout=RESERVATION_CONTAINER_TIMEOUT_MS,
                    )
                    await page.wait_for_selector(".slot-free-full", timeout=FREE_SLOT_TIMEOUT_MS)
                except PlaywrightTimeoutError:
                    # Either a fully booked day or a login redirect; the parser tells them apart.
                    logger.debug("Monkey Padel planning for %s rendered without free slots", day)
                return await page.content()
            except PlaywrightError as exc:
                raise UpstreamError(CLUB_ID, f"planning page failed: {exc}") from exc

    @staticmethod
    def parse_schedule_html(html: str) -> list[openresa.ParsedSlot]:
        soup = BeautifulSoup(html, "html.parser")
        if openresa.is_login_page(soup):
            raise AuthenticationError(CLUB_ID, "openresa served the login form")
        return openresa.parse_schedule(
            soup,
            free_selectors=FREE_SLOT_SELECTORS,
            default_court=UNKNOWN_COURT,
        )
