from __future__ import annotations

import pytest

from app.clubs import COMPLEXEPADEL, COUNTRYCLUBPADEL, ENJOYPADEL, MONKEYPADEL, P4PADELINDOOR, PADELGENTLE, PADELTWINS
from app.services.browser import BrowserManager
from app.services.errors import ConfigurationError
from app.services.registry import AdapterRegistry

PUBLIC_CLUBS = {COMPLEXEPADEL, ENJOYPADEL, PADELGENTLE, PADELTWINS}


@pytest.fixture()
def no_credentials(monkeypatch):
    for name in (
        "MONKEYPADEL_USERNAME",
        "MONKEYPADEL_PASSWORD",
        "COUNTRYCLUBPADEL_USERNAME",
        "COUNTRYCLUBPADEL_PASSWORD",
    ):
        monkeypatch.setattr(f"app.config.{name}", "")
    for n in range(1, 4):
        monkeypatch.delenv(f"P4_EMAIL_{n}", raising=False)
        monkeypatch.delenv(f"P4_PASSWORD_{n}", raising=False)


async def test_clubs_without_credentials_are_skipped(no_credentials, tmp_path):
    registry = AdapterRegistry(browser=BrowserManager(), cookies_dir=tmp_path)
    registry.register_all()
    try:
        assert set(registry.adapters()) == PUBLIC_CLUBS
        assert registry.session_stores() == []
        assert registry.get(MONKEYPADEL) is None
        with pytest.raises(ConfigurationError):
            registry.require(P4PADELINDOOR)
    finally:
        await registry.stop()


async def test_authenticated_clubs_get_session_stores(no_credentials, monkeypatch, tmp_path):
    monkeypatch.setattr("app.config.MONKEYPADEL_USERNAME", "monkey@example.com")
    monkeypatch.setattr("app.config.MONKEYPADEL_PASSWORD", "secret")
    monkeypatch.setattr("app.config.COUNTRYCLUBPADEL_USERNAME", "country@example.com")
    monkeypatch.setattr("app.config.COUNTRYCLUBPADEL_PASSWORD", "secret")
    monkeypatch.setenv("P4_EMAIL_1", "p1@example.com")
    monkeypatch.setenv("P4_PASSWORD_1", "secret")
    monkeypatch.setenv("P4_EMAIL_3", "p3@example.com")
    monkeypatch.setenv("P4_PASSWORD_3", "'secret'")

    registry = AdapterRegistry(browser=BrowserManager(), cookies_dir=tmp_path)
    registry.register_all()
    try:
        assert set(registry.adapters()) == PUBLIC_CLUBS | {MONKEYPADEL, COUNTRYCLUBPADEL, P4PADELINDOOR}
        assert [s.key for s in registry.session_stores()] == [
            MONKEYPADEL,
            COUNTRYCLUBPADEL,
            "p4padelindoor/account1",
            "p4padelindoor/account3",
        ]
        assert registry.session_stores()[0].path == tmp_path / "monkeypadel.json"

        (rotation,) = registry.rotations()
        assert [a.label for a in rotation.accounts] == ["account1", "account3"]
        assert rotation.accounts[1].password == "secret"
    finally:
        await registry.stop()
