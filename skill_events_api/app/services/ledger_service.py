"""
Business logic for wallet credits.

The ``LedgerService`` is the single source of truth for credit
balances.  Every change goes through ``apply_delta`` (or its
lock-holding twin ``apply_locked``), which appends an immutable
``LedgerEntry`` to the wallet history so that the balance always
equals the sum of recorded deltas.  Overdraft is not prevented here:
administrators may deduct below zero, while the join flow checks the
balance itself before debiting.
"""

import logging
import math
from typing import Any, List, Optional

from skill_events_api.app.core.config import settings
from skill_events_api.app.core.errors import InvalidAmount
from skill_events_api.app.core.records import LedgerEntry, utcnow
from skill_events_api.app.core.store import MemoryStore, normalize_user_id, user_key


logger = logging.getLogger(__name__)


def validate_delta(delta: Any) -> int:
    """Return ``delta`` as an ``int`` or raise ``InvalidAmount``.

    Credits are whole units: booleans, strings, fractional or
    non-finite numbers and zero are all rejected.  Floats are rejected
    even when integral so that clients cannot rely on implicit
    rounding.
    """
    if isinstance(delta, bool) or not isinstance(delta, (int, float)):
        raise InvalidAmount("delta must be a whole number of credits")
    if isinstance(delta, float):
        if not math.isfinite(delta):
            raise InvalidAmount("delta must be finite")
        raise InvalidAmount("delta must be a whole number of credits")
    if delta == 0:
        raise InvalidAmount("delta must not be zero")
    return int(delta)


class LedgerService:
    """Service for reading and changing wallet balances."""

    def __init__(self, store: MemoryStore) -> None:
        self._store = store

    async def get_balance(self, user_id: str) -> int:
        """Return the current balance; unseen users start at 0."""
        return self._store.wallet(normalize_user_id(user_id)).balance

    async def get_history(
        self,
        user_id: str,
        filter_text: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[LedgerEntry]:
        """Return a snapshot of the wallet history, most recent first.

        ``filter_text`` keeps only entries whose note contains it
        (case-insensitive).  ``limit`` defaults to
        ``settings.history_default_limit`` and is clamped to
        ``settings.history_max_limit``.
        """
        wallet = self._store.wallet(normalize_user_id(user_id))
        if limit is None:
            limit = settings.history_default_limit
        limit = max(1, min(int(limit), settings.history_max_limit))
        needle = filter_text.strip().lower() if filter_text else ""

        result: List[LedgerEntry] = []
        for entry in reversed(list(wallet.history)):
            if needle and needle not in (entry.note or "").lower():
                continue
            result.append(entry)
            if len(result) >= limit:
                break
        return result

    async def apply_delta(self, user_id: str, delta: Any, note: Optional[str] = None) -> int:
        """Add ``delta`` credits to the wallet and return the new balance.

        Raises ``InvalidAmount`` if ``delta`` is not a non-zero whole
        number; no state changes in that case.
        """
        amount = validate_delta(delta)
        uid = normalize_user_id(user_id)
        async with self._store.locked(user_key(uid)):
            return self.apply_locked(uid, amount, note)

    def apply_locked(self, user_id: str, delta: int, note: Optional[str] = None) -> int:
        """Apply an already validated delta.

        The caller must hold the ``user:<id>`` lock and pass a
        normalized identifier.
        """
        wallet = self._store.wallet(user_id)
        new_balance = wallet.balance + delta
        wallet.history.append(
            LedgerEntry(timestamp=utcnow(), delta=delta, note=note or None, balance_after=new_balance)
        )
        wallet.balance = new_balance
        logger.info("Wallet %s changed by %+d (%s), balance now %d", user_id, delta, note or "-", new_balance)
        return new_balance
