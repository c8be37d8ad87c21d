"""
Round-robin over several accounts of the same club.

Spreading requests over accounts keeps each one under the upstream's
anti-abuse radar.  An account whose session the upstream rejects is parked
until its session is refreshed out-of-band (see ``SessionCheckWorker``).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from app.models import SessionRecord
from app.services.session_store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class Account:
    label: str
    email: str
    password: str
    store: SessionStore


class AccountRotation:
    def __init__(self, accounts: list[Account]) -> None:
        self._accounts = list(accounts)
        self._next_index = 0
        self._unusable: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    def is_usable(self, account: Account) -> bool:
        return account.label not in self._unusable

    async def acquire(self) -> tuple[Account, SessionRecord] | None:
        """
        Next usable account that currently holds a valid session.

        The index is read and advanced under a lock so concurrent callers in
        the same process get distinct accounts in turn.
        """
        async with self._lock:
            count = len(self._accounts)
            for offset in range(count):
                index = (self._next_index + offset) % count
                account = self._accounts[index]
                if not self.is_usable(account):
                    continue
                record = await account.store.get_valid()
                if record is None:
                    continue
                self._next_index = (index + 1) % count
                return account, record
        logger.warning("No account with a valid session available")
        return None

    def mark_unusable(self, account: Account) -> None:
        if account.label not in self._unusable:
            logger.warning("Account %s rejected upstream, parking it", account.label)
        self._unusable.add(account.label)
        account.store.invalidate()

    def restore(self, account: Account) -> None:
        if account.label in self._unusable:
            logger.info("Account %s usable again", account.label)
        self._unusable.discard(account.label)
