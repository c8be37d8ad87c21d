"""
Shared test fixtures.

Provides a FastAPI TestClient wired to:
  • mock club adapters (no external HTTP, no browser)
  • background workers disabled
  • rate limiting disabled
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.clubs import COMPLEXEPADEL, MONKEYPADEL, P4PADELINDOOR, PADELTWINS
from app.main import app
from app.services.browser import BrowserManager
from app.services.health_checker import HealthChecker
from app.services.registry import AdapterRegistry
from tests.mocks.models import make_slot
from tests.mocks.services import MockClubAdapter, failing_adapter


@pytest.fixture()
def _test_env(monkeypatch, tmp_path):
    """
    Internal fixture that patches the registry, workers and limiter so the
    app lifespan runs cleanly against mock adapters.
    """
    # ── Mock adapter registry ─────────────────────────────────────────
    test_registry = AdapterRegistry(browser=BrowserManager(), cookies_dir=tmp_path)
    test_registry.register(
        MockClubAdapter(MONKEYPADEL, [make_slot("18:00", "Piste indoor 01"), make_slot("20:00", "Piste indoor 02")])
    )
    test_registry.register(MockClubAdapter(COMPLEXEPADEL, [make_slot("18:00", "Central"), make_slot("08:00", "Viboja")]))
    test_registry.register(failing_adapter(PADELTWINS))
    test_registry.register(MockClubAdapter(P4PADELINDOOR, [make_slot("19:00", "Court 3")]))

    # Prevent the lifespan from registering real adapters
    test_registry.register_all = lambda: None  # type: ignore[assignment]

    # Patch everywhere `registry` was imported
    for mod_path in (
        "app.services.registry",
        "app.main",
        "app.routers.health",
        "app.routers.clubs",
        "app.routers.search",
        "app.routers.sessions",
        "app.routers.p4",
    ):
        monkeypatch.setattr(f"{mod_path}.registry", test_registry)

    test_checker = HealthChecker(test_registry)
    monkeypatch.setattr("app.routers.status.health_checker", test_checker)

    # ── No background loops ───────────────────────────────────────────
    monkeypatch.setattr("app.main.BACKGROUND_TASKS_ENABLED", False)

    # ── Disable rate limiting in tests ────────────────────────────────
    from app.rate_limit import limiter as _limiter
    monkeypatch.setattr(_limiter, "enabled", False)

    return test_registry


@pytest.fixture()
def mock_registry(_test_env) -> AdapterRegistry:
    """Public alias for tests that reference mock_registry directly."""
    return _test_env


@pytest.fixture()
def client(_test_env: AdapterRegistry) -> TestClient:
    """FastAPI TestClient with mock adapters; runs the app lifespan."""
    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc
