"""
Periodic probe of every club integration.

Each tick calls ``test_connection()`` on all adapters.  A club that fails
``HEALTH_ERROR_THRESHOLD`` times in a row raises an ERROR-level alert, at
most once per ``HEALTH_ALERT_COOLDOWN`` seconds.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Protocol

from app.config import HEALTH_ALERT_COOLDOWN, HEALTH_CHECK_INTERVAL, HEALTH_ERROR_THRESHOLD
from app.models import ClubHealth
from app.services.background import BackgroundWorker
from app.services.club_adapter import ClubAdapter
from app.services.registry import registry

logger = logging.getLogger(__name__)


class AdapterSource(Protocol):
    def adapters(self) -> Mapping[str, ClubAdapter]:
        ...


class HealthChecker(BackgroundWorker):
    def __init__(
        self,
        source: AdapterSource,
        *,
        interval: float = HEALTH_CHECK_INTERVAL,
        error_threshold: int = HEALTH_ERROR_THRESHOLD,
        alert_cooldown: float = HEALTH_ALERT_COOLDOWN,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(interval=interval, name="health-checker")
        self._source = source
        self._error_threshold = error_threshold
        self._alert_cooldown = alert_cooldown
        self._clock = clock
        self._health: dict[str, ClubHealth] = {}
        self._last_alert: dict[str, float] = {}

    def status(self) -> list[ClubHealth]:
        return [self._health[club_id] for club_id in sorted(self._health)]

    def get(self, club_id: str) -> ClubHealth | None:
        return self._health.get(club_id)

    async def _tick(self) -> None:
        adapters = dict(self._source.adapters())
        results = await asyncio.gather(*(self._probe(adapter) for adapter in adapters.values()))
        for club_id, ok in zip(adapters, results):
            self._record(club_id, ok)

    async def _probe(self, adapter: ClubAdapter) -> bool:
        try:
            return await adapter.test_connection()
        except Exception:
            logger.exception("%s connection test raised", adapter.club_id)
            return False

    def _record(self, club_id: str, ok: bool) -> None:
        previous = self._health.get(club_id) or ClubHealth(club_id=club_id)
        now = datetime.now(timezone.utc)

        if ok:
            if previous.error_count >= self._error_threshold:
                logger.info("%s is working again", club_id)
            self._health[club_id] = ClubHealth(club_id=club_id, working=True, last_check=now, error_count=0)
            self._last_alert.pop(club_id, None)
            return

        errors = previous.error_count + 1
        self._health[club_id] = ClubHealth(club_id=club_id, working=False, last_check=now, error_count=errors)
        logger.warning("%s health check failed (%d in a row)", club_id, errors)

        if errors >= self._error_threshold and self._alert_due(club_id):
            self._last_alert[club_id] = self._clock()
            logger.error(
                "ALERT: %s has failed %d consecutive health checks, the integration needs attention",
                club_id,
                errors,
            )

    def _alert_due(self, club_id: str) -> bool:
        last = self._last_alert.get(club_id)
        return last is None or self._clock() - last >= self._alert_cooldown


# ── Singleton instance ────────────────────────────────────────────────────
health_checker = HealthChecker(registry)
