"""
Joining events with wallet credits.

``RegistrationService.join_event`` combines the catalog, the ledger and
the registry into one all-or-nothing operation.  It runs entirely
while holding the event lock and the user's wallet lock (in that
order), so concurrent joins for the same event or the same wallet are
serialized and a user is never charged twice.

The checks run in a fixed order: event lookup, existing admission,
capacity, balance.  A full event therefore reports ``EVENT_FULL`` even
when the caller could not afford it anyway.  The fee is debited before
the admission is recorded; if recording fails the debit is reversed
with a compensating ledger entry.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from skill_events_api.app.core.errors import CapacityExceeded, Conflict, ValidationFailed
from skill_events_api.app.core.store import MemoryStore, event_key, normalize_user_id, user_key
from skill_events_api.app.services.ledger_service import LedgerService
from skill_events_api.app.services.registry_service import RegistryService, resolve_tag


logger = logging.getLogger(__name__)


class JoinStatus(Enum):
    JOINED = "joined"
    ALREADY_JOINED = "already_joined"
    FAILED = "failed"


class FailureReason(Enum):
    """User-facing reasons a join did not happen."""

    EVENT_NOT_FOUND = "EventNotFound"
    EVENT_FULL = "EventFull"
    INSUFFICIENT_CREDITS = "InsufficientCredits"


@dataclass(frozen=True)
class JoinResult:
    """Outcome of ``join_event``.

    ``balance`` is always the caller's balance after the call.
    ``credits_charged`` is set only for ``JOINED``; ``reason`` only
    for ``FAILED``; ``required`` only for insufficient credits.
    """

    status: JoinStatus
    balance: int
    credits_charged: Optional[int] = None
    reason: Optional[FailureReason] = None
    required: Optional[int] = None

    @classmethod
    def joined(cls, charged: int, balance: int) -> "JoinResult":
        return cls(status=JoinStatus.JOINED, balance=balance, credits_charged=charged)

    @classmethod
    def already_joined(cls, balance: int) -> "JoinResult":
        return cls(status=JoinStatus.ALREADY_JOINED, balance=balance)

    @classmethod
    def failed(cls, reason: FailureReason, balance: int, required: Optional[int] = None) -> "JoinResult":
        return cls(status=JoinStatus.FAILED, balance=balance, reason=reason, required=required)


def _validate_fee_override(fee: Any) -> int:
    if isinstance(fee, bool) or not isinstance(fee, int) or fee < 0:
        raise ValidationFailed("fee must be a non-negative whole number of credits")
    return fee


class RegistrationService:
    """Transactional façade for joining events."""

    def __init__(self, store: MemoryStore, ledger: LedgerService, registry: RegistryService) -> None:
        self._store = store
        self._ledger = ledger
        self._registry = registry

    async def join_event(
        self,
        event_id: str,
        user_id: str,
        profile_tag: Optional[str] = None,
        fee_override: Optional[int] = None,
    ) -> JoinResult:
        """Charge the event fee and admit the user, exactly once.

        Repeating the call for an admitted user returns
        ``ALREADY_JOINED`` without touching the wallet.  Failures leave
        balance and admissions unchanged.  ``fee_override`` replaces the
        event fee for this join when given.
        """
        uid = normalize_user_id(user_id)
        tag = resolve_tag(profile_tag)
        if fee_override is not None:
            fee_override = _validate_fee_override(fee_override)

        # Unknown ids take no locks and create no wallet; re-checked under the lock.
        if event_id not in self._store.events:
            logger.info("Join rejected: event %s not found (user %s)", event_id, uid)
            return JoinResult.failed(FailureReason.EVENT_NOT_FOUND, self._store.balance_of(uid))

        async with self._store.locked(event_key(event_id), user_key(uid)):
            balance = await self._ledger.get_balance(uid)
            event = self._store.events.get(event_id)
            if event is None:
                logger.info("Join rejected: event %s not found (user %s)", event_id, uid)
                return JoinResult.failed(FailureReason.EVENT_NOT_FOUND, balance)

            if await self._registry.is_admitted(event_id, uid):
                return JoinResult.already_joined(balance)

            if await self._registry.admitted_count(event_id) >= event.capacity:
                logger.info("Join rejected: event %s is full (user %s)", event_id, uid)
                return JoinResult.failed(FailureReason.EVENT_FULL, balance)

            fee = event.fee_credits if fee_override is None else fee_override
            if balance < fee:
                logger.info("Join rejected: %s has %d credits, event %s costs %d", uid, balance, event_id, fee)
                return JoinResult.failed(FailureReason.INSUFFICIENT_CREDITS, balance, required=fee)

            if fee:
                balance = self._ledger.apply_locked(uid, -fee, f"join:{event_id}")
            try:
                self._registry.admit_locked(event, uid, fee, tag)
            except Conflict:
                balance = self._refund(uid, fee, event_id)
                return JoinResult.already_joined(balance)
            except CapacityExceeded:
                balance = self._refund(uid, fee, event_id)
                return JoinResult.failed(FailureReason.EVENT_FULL, balance)
            except Exception:
                self._refund(uid, fee, event_id)
                raise
            return JoinResult.joined(fee, balance)

    def _refund(self, user_id: str, fee: int, event_id: str) -> int:
        """Reverse a join debit; the caller holds the wallet lock."""
        if not fee:
            return self._store.wallet(user_id).balance
        logger.warning("Reversing %d credit debit for %s after failed admission to %s", fee, user_id, event_id)
        return self._ledger.apply_locked(user_id, fee, f"join-rollback:{event_id}")
