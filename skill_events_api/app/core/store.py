"""
In-memory storage and keyed locking.

The ``MemoryStore`` holds every wallet, event, registration and drill
submission for the lifetime of the process; nothing is persisted and
all state is discarded on restart.  A store instance is created by
``create_app`` and attached to ``app.state`` so that tests and
alternative deployments can inject their own.

Mutations are serialized with ``asyncio.Lock`` objects looked up by
key (``event:<id>`` or ``user:<email>``).  Callers that need several
locks must request them in one ``locked()`` call, event keys first,
so that acquisition order is the same everywhere.
"""

import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, MutableMapping

from .config import settings
from .errors import LockTimeout, ValidationFailed
from .records import DrillResult, Event, Registration, Wallet


logger = logging.getLogger(__name__)


def normalize_user_id(user_id: str) -> str:
    """Return the canonical form of a user identifier (email).

    Identifiers are compared case-insensitively and surrounding
    whitespace is ignored.
    """
    canonical = (user_id or "").strip().lower()
    if not canonical:
        raise ValidationFailed("user identifier is required")
    return canonical


def event_key(event_id: str) -> str:
    return f"event:{event_id}"


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


class MemoryStore:
    """Process-local state for the ledger, catalog and registry."""

    def __init__(self, lock_timeout: float | None = None) -> None:
        self.lock_timeout = settings.lock_timeout_seconds if lock_timeout is None else lock_timeout
        self.wallets: Dict[str, Wallet] = {}
        self.events: Dict[str, Event] = {}
        # event_id -> user_id -> Registration, in admission order
        self.registrations: Dict[str, Dict[str, Registration]] = {}
        # event_id -> tag -> fraction; dropped on every admission
        self.mix_cache: Dict[str, Dict[str, float]] = {}
        # event_id -> user_id -> drill_type -> DrillResult
        self.submissions: Dict[str, Dict[str, Dict[str, DrillResult]]] = {}
        # Entries vanish once no holder or waiter references the lock.
        self._locks: MutableMapping[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def wallet(self, user_id: str) -> Wallet:
        """Return the wallet for ``user_id``, creating an empty one on first use."""
        wallet = self.wallets.get(user_id)
        if wallet is None:
            wallet = Wallet()
            self.wallets[user_id] = wallet
        return wallet

    def balance_of(self, user_id: str) -> int:
        """Return the balance without materializing a wallet."""
        wallet = self.wallets.get(user_id)
        return wallet.balance if wallet is not None else 0

    def event_registrations(self, event_id: str) -> Dict[str, Registration]:
        regs = self.registrations.get(event_id)
        if regs is None:
            regs = {}
            self.registrations[event_id] = regs
        return regs

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def locked(self, *keys: str) -> AsyncIterator[None]:
        """Hold the locks for ``keys`` (acquired in the given order).

        Raises ``LockTimeout`` if any lock cannot be obtained within
        ``lock_timeout`` seconds; locks acquired so far are released.
        """
        acquired: List[asyncio.Lock] = []
        try:
            for key in keys:
                lock = self._lock_for(key)
                try:
                    await asyncio.wait_for(lock.acquire(), timeout=self.lock_timeout)
                except asyncio.TimeoutError:
                    logger.warning("Timed out after %.1fs waiting for lock %s", self.lock_timeout, key)
                    raise LockTimeout(f"resource {key} is busy, retry later") from None
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
