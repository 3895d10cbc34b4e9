"""
Consistency report between wallet debits and event admissions.

Joining debits the wallet before the admission is recorded.  If the
process dies between those two steps the ledger holds a ``join:<id>``
debit without a matching registration.  ``ReconciliationService``
finds such gaps (and the reverse: registrations whose charge has no
debit) so an operator can repair them with credit adjustments.  The
report is read-only.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Tuple

from skill_events_api.app.core.store import MemoryStore


logger = logging.getLogger(__name__)

JOIN_PREFIX = "join:"
ROLLBACK_PREFIX = "join-rollback:"


class ReconciliationService:
    def __init__(self, store: MemoryStore) -> None:
        self._store = store

    def _net_debits(self) -> Dict[Tuple[str, str], int]:
        debits: Dict[Tuple[str, str], int] = defaultdict(int)
        for user_id, wallet in list(self._store.wallets.items()):
            for entry in list(wallet.history):
                note = entry.note or ""
                for prefix in (JOIN_PREFIX, ROLLBACK_PREFIX):
                    if note.startswith(prefix):
                        # Debits are negative deltas, rollbacks positive.
                        debits[(note[len(prefix):], user_id)] -= entry.delta
                        break
        return debits

    async def report(self) -> List[dict]:
        """Return mismatches for events that still exist in the catalog.

        Each item has ``event_id``, ``user_id``, ``debited`` (net
        credits taken by join entries) and ``charged`` (credits recorded
        on the registration, 0 when there is none).
        """
        debits = self._net_debits()
        charged: Dict[Tuple[str, str], int] = {}
        for event_id, regs in list(self._store.registrations.items()):
            for user_id, reg in list(regs.items()):
                charged[(event_id, user_id)] = reg.credits_charged

        issues = []
        for key in sorted(set(debits) | set(charged)):
            event_id, user_id = key
            if event_id not in self._store.events:
                continue
            debited = debits.get(key, 0)
            recorded = charged.get(key, 0)
            if debited != recorded:
                issues.append(
                    {"event_id": event_id, "user_id": user_id, "debited": debited, "charged": recorded}
                )
        if issues:
            logger.warning("Reconciliation found %d mismatched join(s)", len(issues))
        return issues
