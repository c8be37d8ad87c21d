from __future__ import annotations

from app.services.account_rotation import Account, AccountRotation
from app.services.session_check import SessionCheckWorker
from app.services.session_store import SessionState, SessionStore
from tests.mocks.models import make_record
from tests.mocks.services import FakeLogin, failing_login


class _Source:
    def __init__(self, stores, rotations=()) -> None:
        self._stores = list(stores)
        self._rotations = list(rotations)

    def session_stores(self):
        return self._stores

    def rotations(self):
        return self._rotations


def _store(tmp_path, key: str, login=None, *, expires_in_days: float | None = None) -> SessionStore:
    store = SessionStore(key, tmp_path / f"{key}.json", login or FakeLogin())
    if expires_in_days is not None:
        record = make_record(expires_in_days=expires_in_days)
        store.path.write_text(record.model_dump_json(by_alias=True), encoding="utf-8")
    return store


class TestSessionCheck:
    async def test_refreshes_only_stale_sessions(self, tmp_path):
        fresh_login, stale_login, missing_login = FakeLogin(), FakeLogin(), FakeLogin()
        fresh = _store(tmp_path, "fresh", fresh_login, expires_in_days=20)
        stale = _store(tmp_path, "stale", stale_login, expires_in_days=1)
        missing = _store(tmp_path, "missing", missing_login)

        await SessionCheckWorker(_Source([fresh, stale, missing]), threshold_days=3).run_once()

        assert fresh_login.calls == 0
        assert stale_login.calls == 1
        assert missing_login.calls == 1
        assert stale.state is SessionState.VALID

    async def test_failed_refresh_is_logged_not_raised(self, tmp_path, caplog):
        broken = _store(tmp_path, "broken", failing_login())
        other_login = FakeLogin()
        other = _store(tmp_path, "other", other_login)

        await SessionCheckWorker(_Source([broken, other])).run_once()

        assert broken.state is SessionState.FAILED
        assert other_login.calls == 1
        assert "broken" in caplog.text

    async def test_parked_account_is_restored_after_refresh(self, tmp_path):
        store = _store(tmp_path, "account1", expires_in_days=20)
        account = Account(label="account1", email="p1@example.com", password="x", store=store)
        rotation = AccountRotation([account])

        await store.get_valid()
        rotation.mark_unusable(account)
        assert not rotation.is_usable(account)

        await SessionCheckWorker(_Source([store], [rotation])).run_once()

        assert rotation.is_usable(account)

    async def test_parked_account_stays_parked_when_refresh_fails(self, tmp_path):
        store = _store(tmp_path, "account1", failing_login())
        account = Account(label="account1", email="p1@example.com", password="x", store=store)
        rotation = AccountRotation([account])
        rotation.mark_unusable(account)

        await SessionCheckWorker(_Source([store], [rotation])).run_once()

        assert not rotation.is_usable(account)
