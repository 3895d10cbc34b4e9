"""Internal records held by the in-memory store.

These are plain domain objects with no API input rules; the pydantic
schemas in ``app.schemas`` translate them for HTTP responses.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


LOCATION_TYPES = ("in_person", "online")
PLAYER_TAGS = ("youth", "teen", "adult", "pro", "elite")
DEFAULT_DRILLS = ("3PT", "FT", "2PT", "LAYUP")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LedgerEntry:
    """One immutable line of a wallet's history."""

    timestamp: datetime
    delta: int
    note: Optional[str]
    balance_after: int


@dataclass
class Wallet:
    balance: int = 0
    history: List[LedgerEntry] = field(default_factory=list)


@dataclass(frozen=True)
class Event:
    id: str
    name: str
    fee_credits: int
    capacity: int
    location_type: str
    schedule: datetime
    drills_enabled: frozenset
    prize_pool_credits: int = 0


@dataclass(frozen=True)
class Registration:
    """Admission of one user into one event."""

    event_id: str
    user_id: str
    credits_charged: int
    admitted_at: datetime
    tag: str


@dataclass(frozen=True)
class DrillResult:
    made: int
    attempts: int
    time_ms: Optional[int]
    verified_by: Optional[str]
    created_at: datetime
