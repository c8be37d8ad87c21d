"""
Shared Playwright browser for login flows and JavaScript-rendered pages.

Chromium is launched lazily on first use and shared by every club.  Each
``session()`` gets its own isolated browser context so cookies never leak
between clubs or accounts.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random
from collections.abc import AsyncIterator

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from app.config import BROWSER_HEADLESS
from app.models import CookieRecord

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

# Navigator tweaks so login pages do not flag the automation
STEALTH_JS = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['fr-FR', 'fr', 'en-US', 'en'] });
window.chrome = { runtime: {} };
"""


class BrowserManager:
    """Owns the Playwright driver and the chromium instance."""

    def __init__(self, headless: bool = BROWSER_HEADLESS, block_resources: bool = True) -> None:
        self._headless = headless
        self._block_resources = block_resources
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def start(self) -> None:
        async with self._lock:
            if self._browser is not None:
                return
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self._headless,
                args=[
                    "--disable-blink-features=AutomationControlled",
                    "--disable-dev-shm-usage",
                    "--no-sandbox",
                ],
            )
            logger.info("Browser started (headless=%s)", self._headless)

    async def stop(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
                logger.info("Browser stopped")

    @contextlib.asynccontextmanager
    async def session(
        self,
        cookies: list[CookieRecord] | None = None,
        *,
        cookie_url: str | None = None,
    ) -> AsyncIterator[tuple[BrowserContext, Page]]:
        """Open an isolated context + page, optionally pre-loaded with cookies."""
        if self._browser is None:
            await self.start()
        assert self._browser is not None

        context = await self._browser.new_context(
            user_agent=DEFAULT_USER_AGENT,
            viewport={"width": 1280, "height": 900},
            locale="fr-FR",
            timezone_id="Europe/Paris",
        )
        try:
            await context.add_init_script(STEALTH_JS)
            if self._block_resources:
                await context.route(
                    "**/*.{png,jpg,jpeg,gif,svg,woff,woff2,ttf,eot}",
                    lambda route: route.abort(),
                )
            if cookies:
                await context.add_cookies(to_playwright_cookies(cookies, cookie_url))
            page = await context.new_page()
            yield context, page
        finally:
            await context.close()


async def type_like_human(page: Page, selector: str, text: str) -> None:
    """Type character by character with small random pauses."""
    await page.click(selector)
    for char in text:
        await page.keyboard.type(char)
        await asyncio.sleep(random.uniform(0.05, 0.15))


async def cookies_from_context(context: BrowserContext) -> list[CookieRecord]:
    raw = await context.cookies()
    return [
        CookieRecord(
            name=c["name"],
            value=c["value"],
            expires=c.get("expires", -1),
            domain=c.get("domain"),
            path=c.get("path"),
        )
        for c in raw
    ]


def to_playwright_cookies(cookies: list[CookieRecord], url: str | None = None) -> list[dict]:
    converted = []
    for cookie in cookies:
        item: dict = {"name": cookie.name, "value": cookie.value}
        if cookie.domain:
            item["domain"] = cookie.domain
            item["path"] = cookie.path or "/"
        elif url:
            item["url"] = url
        else:
            continue
        if not cookie.is_session_cookie:
            item["expires"] = cookie.expires
        converted.append(item)
    return converted


# ── Singleton instance ────────────────────────────────────────────────────
browser_manager = BrowserManager()
