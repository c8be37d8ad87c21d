"""
Two-step gestion-sports login: e-mail first, then password.
"""

from __future__ import annotations

import logging

from playwright.async_api import Error as PlaywrightError

from app.models import CookieRecord
from app.services.browser import BrowserManager, cookies_from_context, type_like_human
from app.services.errors import SessionRefreshError
from app.services.p4padelindoor.config import LOGIN_URL

logger = logging.getLogger(__name__)

_EMAIL_SELECTOR = 'input[name="email"]'
_PASSWORD_SELECTOR = 'input[name="pass"][type="password"]'
_CONTINUE_BUTTON = "button:has-text('Connexion / Inscription')"
_SUBMIT_BUTTON = "button[type=submit]:has-text('Se connecter')"

_TIMEOUT_MS = 30_000


class P4Login:
    def __init__(self, browser: BrowserManager, *, email: str, password: str) -> None:
        self._browser = browser
        self._email = email
        self._password = password

    async def __call__(self) -> list[CookieRecord]:
        async with self._browser.session() as (context, page):
            try:
                await page.goto(LOGIN_URL, wait_until="networkidle", timeout=_TIMEOUT_MS)
                await page.wait_for_selector(_EMAIL_SELECTOR, timeout=_TIMEOUT_MS)
                await type_like_human(page, _EMAIL_SELECTOR, self._email)
                await page.click(_CONTINUE_BUTTON)

                await page.wait_for_selector(_PASSWORD_SELECTOR, timeout=10_000)
                await type_like_human(page, _PASSWORD_SELECTOR, self._password)
                await page.click(_SUBMIT_BUTTON)
                await page.wait_for_load_state("networkidle", timeout=_TIMEOUT_MS)

                body = await page.inner_text("body")
            except PlaywrightError as exc:
                raise SessionRefreshError(self._email, f"login page interaction failed: {exc}") from exc

            # The member area no longer shows the sign-in entry points.
            if "Connexion" in body or "Inscription" in body:
                raise SessionRefreshError(self._email, "gestion-sports login did not succeed")

            cookies = await cookies_from_context(context)
            logger.info("P4 login for %s yielded %d cookies", self._email, len(cookies))
            return cookies
