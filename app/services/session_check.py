"""
Daily session maintenance.

Logging in from a live search is slow and noisy, so sessions close to expiry
(or already rejected) are renewed here instead.  Multi-account clubs get
their parked accounts back once a fresh session has been obtained.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from app.config import SESSION_CHECK_INTERVAL, SESSION_REFRESH_THRESHOLD_DAYS
from app.services.account_rotation import AccountRotation
from app.services.background import BackgroundWorker
from app.services.errors import SessionRefreshError
from app.services.registry import registry
from app.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class SessionSource(Protocol):
    def session_stores(self) -> Iterable[SessionStore]:
        ...

    def rotations(self) -> Iterable[AccountRotation]:
        ...


class SessionCheckWorker(BackgroundWorker):
    def __init__(
        self,
        source: SessionSource,
        *,
        interval: float = SESSION_CHECK_INTERVAL,
        threshold_days: int = SESSION_REFRESH_THRESHOLD_DAYS,
    ) -> None:
        super().__init__(interval=interval, name="session-check", run_at_start=True)
        self._source = source
        self._threshold_days = threshold_days

    async def _tick(self) -> None:
        refreshed = failed = 0
        for store in self._source.session_stores():
            if not await store.needs_refresh(self._threshold_days):
                continue
            try:
                await store.refresh()
                refreshed += 1
            except SessionRefreshError as exc:
                failed += 1
                logger.error("Scheduled refresh of %s failed: %s", store.key, exc)

        for rotation in self._source.rotations():
            for account in rotation.accounts:
                if not rotation.is_usable(account) and await account.store.get_valid() is not None:
                    rotation.restore(account)

        logger.info("Session check done: %d refreshed, %d failed", refreshed, failed)


# ── Singleton instance ────────────────────────────────────────────────────
session_check = SessionCheckWorker(registry)
