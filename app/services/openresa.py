"""
Pieces shared by every club hosted on openresa.com.

Openresa renders one ``.schedule-container`` per court; each container
holds ``a.slot`` anchors whose ``data-timestart`` attribute is the start time
in minutes since midnight.  Free slots carry a ``slot-free`` (or
``slot-free-full``) class.  Logged-in pages need the session cookies
obtained through the ``#form-username`` / ``#form-password`` login form.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Error as PlaywrightError

from app.models import CookieRecord
from app.services.browser import BrowserManager, cookies_from_context, type_like_human
from app.services.errors import SessionRefreshError
from app.services.normalization import DEFAULT_DURATION_MINUTES, minutes_to_time

logger = logging.getLogger(__name__)

BASE_URL = "https://openresa.com"

USERNAME_SELECTOR = "#form-username"
PASSWORD_SELECTOR = "#form-password"
SUBMIT_SELECTOR = "button[type=submit]"
LOGIN_ERROR_SELECTOR = ".form-alerts .alert-error"

_LOGIN_TIMEOUT_MS = 30_000


@dataclass
class ParsedSlot:
    court: str
    time: str | None  # "HH:MM" or None when data-timestart is missing/garbled
    duration_minutes: int
    schedule_id: str | None = None
    href: str | None = None


# ── Parsing ────────────────────────────────────────────────────────────────


def is_login_page(soup: BeautifulSoup) -> bool:
    return soup.select_one(USERNAME_SELECTOR) is not None and soup.select_one(PASSWORD_SELECTOR) is not None


def court_name(container: Tag, default: str) -> str:
    tag = container.select_one(".schedule-header-name .media-body")
    if tag is None:
        return default
    name = " ".join(tag.get_text(" ", strip=True).split())
    return name or default


def slot_time(anchor: Tag) -> str | None:
    raw = (anchor.get("data-timestart") or "").strip()
    if not raw.isdigit():
        return None
    return minutes_to_time(int(raw))


def slot_duration(anchor: Tag) -> int:
    raw = (anchor.get("data-duration") or "").strip()
    return int(raw) if raw.isdigit() and int(raw) > 0 else DEFAULT_DURATION_MINUTES


def parse_schedule(
    soup: BeautifulSoup,
    *,
    free_selectors: Sequence[str],
    default_court: str,
) -> list[ParsedSlot]:
    """
    Collect free slots from every ``.schedule-container``.

    *free_selectors* are tried in order per container; the first selector
    that matches anything wins (later ones are fallbacks for markup drift).
    """
    containers = soup.select(".schedule-container")
    if not containers:
        logger.warning("No .schedule-container found in openresa page")
        return []

    parsed: list[ParsedSlot] = []
    for container in containers:
        name = court_name(container, default_court)
        anchors: list[Tag] = []
        for selector in free_selectors:
            anchors = container.select(selector)
            if anchors:
                break
        for anchor in anchors:
            parsed.append(
                ParsedSlot(
                    court=name,
                    time=slot_time(anchor),
                    duration_minutes=slot_duration(anchor),
                    schedule_id=anchor.get("data-schedule"),
                    href=anchor.get("href"),
                )
            )
    return parsed


# ── Login flow ─────────────────────────────────────────────────────────────


class OpenresaLogin:
    """
    Headless-browser login against an openresa club page.

    Instances are passed to ``SessionStore`` as its login callable.
    """

    def __init__(
        self,
        browser: BrowserManager,
        *,
        club_url: str,
        username: str,
        password: str,
        remember_selector: str = "#ch-remember",
    ) -> None:
        self._browser = browser
        self._club_url = club_url
        self._username = username
        self._password = password
        self._remember_selector = remember_selector

    async def __call__(self) -> list[CookieRecord]:
        async with self._browser.session() as (context, page):
            try:
                await page.goto(self._club_url, wait_until="networkidle", timeout=_LOGIN_TIMEOUT_MS)
                await page.wait_for_selector(USERNAME_SELECTOR, timeout=_LOGIN_TIMEOUT_MS)
                await type_like_human(page, USERNAME_SELECTOR, self._username)
                await type_like_human(page, PASSWORD_SELECTOR, self._password)

                remember = await page.query_selector(self._remember_selector)
                if remember is not None and not await remember.is_checked():
                    await remember.check()

                await page.click(SUBMIT_SELECTOR)
                await page.wait_for_load_state("networkidle", timeout=_LOGIN_TIMEOUT_MS)
            except PlaywrightError as exc:
                raise SessionRefreshError(self._club_url, f"login page interaction failed: {exc}") from exc

            if await page.query_selector(LOGIN_ERROR_SELECTOR) is not None:
                raise SessionRefreshError(self._club_url, "openresa rejected the credentials")

            cookies = await cookies_from_context(context)
            logger.info("Openresa login on %s yielded %d cookies", self._club_url, len(cookies))
            return cookies
