"""
Persistent, self-refreshing session cookies for clubs that require a login.

One ``SessionStore`` exists per club (or per account for clubs where several
accounts are rotated).  The store owns a JSON file::

    {"cookies": [{"name": …, "value": …, "expires": …}, …],
     "expiresAt": <epoch ms>, "createdAt": <epoch ms>}

and a login callable (usually a headless-browser flow) used to replace it.

State machine::

    MISSING ──refresh──▶ VALID ──time passes / upstream rejects──▶ EXPIRED
                           ▲                                         │
                           └──────────── refresh ◀───────────────────┘
                                            │
                                            └──▶ FAILED (until a later refresh succeeds)

Only one refresh runs at a time per store.  Callers that arrive while a
login is running join it and get its outcome (record or error) instead of
logging in again.  The login runs as its own task with its own time budget
(``SESSION_LOGIN_TIMEOUT_SECONDS``): a caller that gives up waiting does not
cancel it, and a login that overruns the budget leaves the store FAILED.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import os
import time
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from app.config import (
    SESSION_DEFAULT_TTL_DAYS,
    SESSION_LOGIN_TIMEOUT_SECONDS,
    SESSION_MAX_LIFETIME_DAYS,
)
from app.models import CookieRecord, SessionRecord, SessionStatus
from app.services.errors import SessionRefreshError

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000

LoginFlow = Callable[[], Awaitable[list[CookieRecord]]]


class SessionState(str, enum.Enum):
    MISSING = "missing"
    VALID = "valid"
    EXPIRED = "expired"
    REFRESHING = "refreshing"
    FAILED = "failed"


def compute_expires_at(
    cookies: Iterable[CookieRecord],
    *,
    now_ms: int,
    default_ttl_days: int = SESSION_DEFAULT_TTL_DAYS,
    max_lifetime_days: int = SESSION_MAX_LIFETIME_DAYS,
    preferred_cookie: str | None = None,
    fixed_ttl_days: int | None = None,
) -> int:
    """
    Work out when a freshly captured session should be considered stale.

    Uses the earliest future expiry among persistent cookies (or only the
    *preferred_cookie* when it is present), falls back to *default_ttl_days*
    when no cookie carries an expiry, and never exceeds *max_lifetime_days*.
    """
    ceiling = now_ms + max_lifetime_days * DAY_MS
    if fixed_ttl_days is not None:
        return min(now_ms + fixed_ttl_days * DAY_MS, ceiling)

    cookies = list(cookies)

    def _future_expiries(candidates: Iterable[CookieRecord]) -> list[int]:
        return [
            int(c.expires * 1000)
            for c in candidates
            if not c.is_session_cookie and c.expires * 1000 > now_ms
        ]

    expiries = _future_expiries(cookies)
    if preferred_cookie:
        preferred = _future_expiries(c for c in cookies if c.name == preferred_cookie)
        if preferred:
            expiries = preferred

    expires_at = min(expiries) if expiries else now_ms + default_ttl_days * DAY_MS
    return min(expires_at, ceiling)


class SessionStore:
    """File-backed session for one club/account with a single-flight refresh."""

    def __init__(
        self,
        key: str,
        path: Path,
        login: LoginFlow,
        *,
        preferred_cookie: str | None = None,
        fixed_ttl_days: int | None = None,
        default_ttl_days: int = SESSION_DEFAULT_TTL_DAYS,
        max_lifetime_days: int = SESSION_MAX_LIFETIME_DAYS,
        login_timeout: float = SESSION_LOGIN_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.key = key
        self.path = path
        self._login = login
        self._preferred_cookie = preferred_cookie
        self._fixed_ttl_days = fixed_ttl_days
        self._default_ttl_days = default_ttl_days
        self._max_lifetime_days = max_lifetime_days
        self._login_timeout = login_timeout
        self._clock = clock

        self._state = SessionState.MISSING
        self._record: SessionRecord | None = None
        # createdAt of a record the upstream rejected; it must not be reused.
        self._rejected_created_at: int | None = None
        self._refresh_task: asyncio.Task[SessionRecord] | None = None

    # ── Introspection ──────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def is_valid(self, record: SessionRecord) -> bool:
        """Not expired, not implausibly far in the future, not rejected upstream."""
        now = self._now_ms()
        if record.expires_at <= now:
            return False
        if record.expires_at > now + self._max_lifetime_days * DAY_MS:
            logger.warning(
                "Session %s has an implausible expiry (%d), treating it as corrupt",
                self.key,
                record.expires_at,
            )
            return False
        return record.created_at != self._rejected_created_at

    def status(self) -> SessionStatus:
        expires = None
        if self._record is not None:
            expires = datetime.fromtimestamp(self._record.expires_at / 1000, tz=timezone.utc)
        return SessionStatus(key=self.key, state=self._state.value, expires_at=expires)

    # ── Read ───────────────────────────────────────────────────────────

    async def get_valid(self) -> SessionRecord | None:
        """Return a usable session, or None when a refresh is needed. Never raises."""
        stored = await self._load()
        candidates = [r for r in (stored, self._record) if r is not None]
        # Prefer whichever copy was created last (a cron job may have written the file).
        candidates.sort(key=lambda r: r.created_at, reverse=True)

        for record in candidates:
            if self.is_valid(record):
                self._record = record
                if self._state is not SessionState.REFRESHING:
                    self._state = SessionState.VALID
                return record

        if self._state not in (SessionState.REFRESHING, SessionState.FAILED):
            self._state = SessionState.EXPIRED if candidates else SessionState.MISSING
        return None

    async def ensure_valid(self) -> SessionRecord:
        """A valid session, logging in if necessary (raises SessionRefreshError)."""
        record = await self.get_valid()
        if record is not None:
            return record
        return await self.refresh()

    async def needs_refresh(self, threshold_days: int) -> bool:
        record = await self.get_valid()
        if record is None:
            return True
        return record.expires_at - self._now_ms() < threshold_days * DAY_MS

    def invalidate(self) -> None:
        """Mark the current session as rejected by the upstream site."""
        if self._record is not None:
            self._rejected_created_at = self._record.created_at
        if self._state is not SessionState.REFRESHING:
            self._state = SessionState.EXPIRED
        logger.info("Session %s invalidated", self.key)

    # ── Refresh ────────────────────────────────────────────────────────

    async def refresh(self) -> SessionRecord:
        """
        Run the login flow once and persist the resulting session.

        Joins the login already in flight, if any.  Cancelling the caller
        (for instance through an adapter timeout) does not cancel the login.
        """
        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.create_task(self._run_login())
            task.add_done_callback(self._login_finished)
            self._refresh_task = task
        return await asyncio.shield(task)

    def _login_finished(self, task: asyncio.Task[SessionRecord]) -> None:
        # The outcome is delivered through the shield; mark it retrieved even
        # when every caller has already given up.
        if not task.cancelled():
            task.exception()

    async def _run_login(self) -> SessionRecord:
        self._state = SessionState.REFRESHING
        logger.info("Refreshing session %s", self.key)
        try:
            cookies = await asyncio.wait_for(self._login(), self._login_timeout)
            if not cookies:
                raise SessionRefreshError(self.key, "login flow returned no cookies")
        except asyncio.TimeoutError as exc:
            self._state = SessionState.FAILED
            logger.error("Session refresh for %s timed out after %.0fs", self.key, self._login_timeout)
            raise SessionRefreshError(self.key, f"login timed out after {self._login_timeout:g}s") from exc
        except asyncio.CancelledError:
            self._state = SessionState.EXPIRED if self._record else SessionState.MISSING
            raise
        except Exception as exc:
            self._state = SessionState.FAILED
            logger.error("Session refresh for %s failed: %s", self.key, exc)
            if isinstance(exc, SessionRefreshError):
                raise
            raise SessionRefreshError(self.key, str(exc)) from exc

        now = self._now_ms()
        record = SessionRecord(
            cookies=cookies,
            expires_at=compute_expires_at(
                cookies,
                now_ms=now,
                default_ttl_days=self._default_ttl_days,
                max_lifetime_days=self._max_lifetime_days,
                preferred_cookie=self._preferred_cookie,
                fixed_ttl_days=self._fixed_ttl_days,
            ),
            created_at=now,
        )
        self._record = record
        self._rejected_created_at = None
        self._state = SessionState.VALID

        try:
            await self.save(record)
        except OSError:
            logger.exception("Could not persist session %s, keeping it in memory only", self.key)

        logger.info(
            "Session %s refreshed (%d cookies, expires %s)",
            self.key,
            len(cookies),
            datetime.fromtimestamp(record.expires_at / 1000, tz=timezone.utc).isoformat(),
        )
        return record

    # ── Persistence ────────────────────────────────────────────────────

    async def save(self, record: SessionRecord) -> None:
        """Replace the session file atomically (write temp file, then rename)."""
        payload = record.model_dump_json(by_alias=True, indent=2)
        await asyncio.to_thread(self._write, payload)

    def _write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, self.path)

    async def _load(self) -> SessionRecord | None:
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Cannot read session file %s: %s", self.path, exc)
            return None
        try:
            return SessionRecord.model_validate_json(raw)
        except ValidationError:
            logger.warning("Session file %s is corrupt, ignoring it", self.path)
            return None
