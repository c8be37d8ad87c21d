"""
Club adapter registry – holds every integrated padel club.

Provides a single place to look up an adapter by club id, plus the session
stores and account rotations the background workers maintain.
Initialized once at application startup.

Clubs that need credentials are skipped (with a warning) when none are
configured; the rest of the application simply sees fewer adapters.
"""

from __future__ import annotations

import logging
from pathlib import Path

from app import config
from app.services.account_rotation import Account, AccountRotation
from app.services.browser import BrowserManager, browser_manager
from app.services.club_adapter import BaseClubAdapter
from app.services.complexepadel.client import ComplexePadelClient
from app.services.complexepadel.service import ComplexePadelService
from app.services.countryclubpadel import config as countryclub_config
from app.services.countryclubpadel.client import CountryClubPadelClient
from app.services.countryclubpadel.service import CountryClubPadelService
from app.services.enjoypadel.client import EnjoyPadelClient
from app.services.enjoypadel.service import EnjoyPadelService
from app.services.errors import ConfigurationError
from app.services.monkeypadel import config as monkeypadel_config
from app.services.monkeypadel.client import MonkeyPadelClient
from app.services.monkeypadel.service import MonkeyPadelService
from app.services.openresa import OpenresaLogin
from app.services.p4padelindoor import config as p4_config
from app.services.p4padelindoor.client import P4Client
from app.services.p4padelindoor.login import P4Login
from app.services.p4padelindoor.service import P4PadelIndoorService
from app.services.padelgentle.client import PadelGentleClient
from app.services.padelgentle.service import PadelGentleService
from app.services.padeltwins.client import PadelTwinsClient
from app.services.padeltwins.service import PadelTwinsService
from app.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    Registry of all padel club adapters, keyed by club id
    (e.g. "monkeypadel").
    """

    def __init__(
        self,
        *,
        browser: BrowserManager = browser_manager,
        cookies_dir: Path = config.COOKIES_DIR,
    ) -> None:
        self._browser = browser
        self._cookies_dir = cookies_dir
        self._adapters: dict[str, BaseClubAdapter] = {}
        self._stores: list[SessionStore] = []
        self._rotations: list[AccountRotation] = []

    # ── Registration ───────────────────────────────────────────────────

    def register(self, adapter: BaseClubAdapter) -> None:
        self._adapters[adapter.club_id] = adapter

    def register_all(self) -> None:
        self.register(ComplexePadelService(ComplexePadelClient()))
        self.register(EnjoyPadelService(EnjoyPadelClient()))
        self.register(PadelTwinsService(PadelTwinsClient()))
        self.register(PadelGentleService(PadelGentleClient()))
        self.register_monkeypadel()
        self.register_countryclubpadel()
        self.register_p4padelindoor()
        logger.info("Registered %d club adapters: %s", len(self._adapters), ", ".join(self._adapters))

    def register_monkeypadel(self) -> None:
        if not (config.MONKEYPADEL_USERNAME and config.MONKEYPADEL_PASSWORD):
            logger.warning("MONKEYPADEL_USERNAME/PASSWORD not set, Monkey Padel disabled")
            return
        store = self._store(
            monkeypadel_config.CLUB_ID,
            OpenresaLogin(
                self._browser,
                club_url=monkeypadel_config.CLUB_URL,
                username=config.MONKEYPADEL_USERNAME,
                password=config.MONKEYPADEL_PASSWORD,
            ),
        )
        self.register(MonkeyPadelService(MonkeyPadelClient(self._browser), store))

    def register_countryclubpadel(self) -> None:
        if not (config.COUNTRYCLUBPADEL_USERNAME and config.COUNTRYCLUBPADEL_PASSWORD):
            logger.warning("COUNTRYCLUBPADEL_USERNAME/PASSWORD not set, Country Club Padel disabled")
            return
        store = self._store(
            countryclub_config.CLUB_ID,
            OpenresaLogin(
                self._browser,
                club_url=countryclub_config.CLUB_URL,
                username=config.COUNTRYCLUBPADEL_USERNAME,
                password=config.COUNTRYCLUBPADEL_PASSWORD,
                remember_selector=countryclub_config.REMEMBER_SELECTOR,
            ),
            fixed_ttl_days=countryclub_config.SESSION_TTL_DAYS,
        )
        self.register(CountryClubPadelService(CountryClubPadelClient(), store))

    def register_p4padelindoor(self) -> None:
        credentials = config.p4_accounts()
        if not credentials:
            logger.warning("No P4_EMAIL_n/P4_PASSWORD_n pairs set, P4 Padel Indoor disabled")
            return
        accounts = []
        for number, email, password in credentials:
            store = self._store(
                f"{p4_config.CLUB_ID}/account{number}",
                P4Login(self._browser, email=email, password=password),
                preferred_cookie=p4_config.SESSION_COOKIE,
            )
            accounts.append(Account(label=f"account{number}", email=email, password=password, store=store))
        rotation = AccountRotation(accounts)
        self._rotations.append(rotation)
        self.register(P4PadelIndoorService(P4Client(), rotation))

    def _store(self, key: str, login, **kwargs) -> SessionStore:
        store = SessionStore(key, self._cookies_dir / f"{key}.json", login, **kwargs)
        self._stores.append(store)
        return store

    # ── Lookup ─────────────────────────────────────────────────────────

    def get(self, club_id: str) -> BaseClubAdapter | None:
        return self._adapters.get(club_id)

    def require(self, club_id: str) -> BaseClubAdapter:
        adapter = self._adapters.get(club_id)
        if adapter is None:
            raise ConfigurationError(f"{club_id} is not configured (missing credentials?)")
        return adapter

    def adapters(self) -> dict[str, BaseClubAdapter]:
        return dict(self._adapters)

    def session_stores(self) -> list[SessionStore]:
        return list(self._stores)

    def rotations(self) -> list[AccountRotation]:
        return list(self._rotations)

    # ── Lifecycle ──────────────────────────────────────────────────────

    async def stop(self) -> None:
        """Close every adapter's HTTP client and the shared browser."""
        for adapter in self._adapters.values():
            try:
                await adapter.close()
            except Exception:
                logger.exception("Closing %s failed", adapter.club_id)
        await self._browser.stop()


# ── Singleton instance ────────────────────────────────────────────────────
registry = AdapterRegistry()
