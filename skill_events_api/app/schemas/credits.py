"""
Pydantic models for wallet credits.

Credits are whole units.  ``CreditApply.delta`` is accepted as any
JSON value so that malformed amounts reach the ledger's own
validation and are reported as ``invalid_amount`` rather than a
generic schema error.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from skill_events_api.app.core.records import LedgerEntry


class CreditBalance(BaseModel):
    balance: int = Field(..., examples=[70])


class CreditApply(BaseModel):
    """Schema for granting (positive delta) or deducting (negative delta) credits."""

    email: str = Field(..., min_length=1, examples=["a@x.com"])
    delta: Any = Field(..., examples=[100])
    note: Optional[str] = Field(None, examples=["admin:grant"])


class LedgerEntryRead(BaseModel):
    timestamp: datetime
    delta: int
    note: Optional[str] = None
    balance_after: int

    @classmethod
    def from_record(cls, entry: LedgerEntry) -> "LedgerEntryRead":
        return cls(
            timestamp=entry.timestamp,
            delta=entry.delta,
            note=entry.note,
            balance_after=entry.balance_after,
        )


class CreditHistory(BaseModel):
    history: List[LedgerEntryRead]


class ReconciliationItem(BaseModel):
    event_id: str
    user_id: str
    debited: int
    charged: int


class ReconciliationReport(BaseModel):
    ok: bool
    issues: List[ReconciliationItem]
