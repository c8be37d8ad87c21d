from __future__ import annotations

import logging

from app.services.health_checker import HealthChecker
from tests.mocks.services import MockClubAdapter


class _Source:
    def __init__(self, *adapters: MockClubAdapter) -> None:
        self._adapters = {a.club_id: a for a in adapters}

    def adapters(self):
        return self._adapters


class _RaisingAdapter(MockClubAdapter):
    async def test_connection(self) -> bool:
        raise RuntimeError("probe crashed")


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _checker(*adapters, clock=None, **kwargs) -> HealthChecker:
    return HealthChecker(_Source(*adapters), error_threshold=3, alert_cooldown=100, clock=clock or _Clock(), **kwargs)


def _alerts(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.levelno == logging.ERROR and "ALERT" in r.getMessage()]


class TestHealthChecker:
    async def test_healthy_club(self):
        checker = _checker(MockClubAdapter("club-a"))
        await checker.run_once()

        (health,) = checker.status()
        assert health.club_id == "club-a"
        assert health.working is True
        assert health.error_count == 0
        assert health.last_check is not None

    async def test_status_sorted_by_club_id(self):
        checker = _checker(MockClubAdapter("zeta"), MockClubAdapter("alpha"))
        await checker.run_once()
        assert [h.club_id for h in checker.status()] == ["alpha", "zeta"]

    async def test_unknown_club(self):
        assert _checker().get("nope") is None

    async def test_failures_accumulate(self):
        adapter = MockClubAdapter("club-a", healthy=False)
        checker = _checker(adapter)
        for _ in range(2):
            await checker.run_once()

        health = checker.get("club-a")
        assert health.working is False
        assert health.error_count == 2

    async def test_alert_after_threshold(self, caplog):
        checker = _checker(MockClubAdapter("club-a", healthy=False))
        for _ in range(2):
            await checker.run_once()
        assert _alerts(caplog) == []

        await checker.run_once()
        assert len(_alerts(caplog)) == 1
        assert "club-a" in _alerts(caplog)[0].getMessage()

    async def test_alert_cooldown(self, caplog):
        clock = _Clock()
        checker = _checker(MockClubAdapter("club-a", healthy=False), clock=clock)
        for _ in range(5):
            await checker.run_once()
        assert len(_alerts(caplog)) == 1

        clock.now = 150
        await checker.run_once()
        assert len(_alerts(caplog)) == 2

    async def test_recovery_resets_counter(self, caplog):
        adapter = MockClubAdapter("club-a", healthy=False)
        checker = _checker(adapter)
        for _ in range(3):
            await checker.run_once()

        adapter.healthy = True
        with caplog.at_level(logging.INFO):
            await checker.run_once()

        health = checker.get("club-a")
        assert health.working is True
        assert health.error_count == 0
        assert "working again" in caplog.text

        # A new failure streak alerts again without waiting for the cooldown.
        adapter.healthy = False
        for _ in range(3):
            await checker.run_once()
        assert len(_alerts(caplog)) == 2

    async def test_probe_exception_counts_as_failure(self):
        checker = _checker(_RaisingAdapter("club-a"), MockClubAdapter("club-b"))
        await checker.run_once()

        assert checker.get("club-a").working is False
        assert checker.get("club-b").working is True

    async def test_start_and_stop(self):
        checker = _checker(MockClubAdapter("club-a"), interval=3600)
        await checker.start()
        assert checker.is_running
        await checker.stop()
        assert not checker.is_running
