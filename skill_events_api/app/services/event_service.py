"""
Business logic for the event catalog.

The ``EventService`` performs create/read/update/delete on event
records held in the ``MemoryStore``.  Apart from field validation the
catalog enforces no business rules; capacity and fees are applied by
the registration flow.
"""

import dataclasses
import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from skill_events_api.app.core.config import settings
from skill_events_api.app.core.errors import NotFound, ValidationFailed
from skill_events_api.app.core.records import DEFAULT_DRILLS, LOCATION_TYPES, Event, utcnow
from skill_events_api.app.core.store import MemoryStore, event_key
from skill_events_api.app.schemas.event import EventCreate


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "name",
    "fee_credits",
    "capacity",
    "location_type",
    "schedule",
    "drills_enabled",
    "prize_pool_credits",
}


def new_event_id() -> str:
    """Return a short random identifier (12 hex characters)."""
    return secrets.token_hex(6)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _whole(value: Any, field_name: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationFailed(f"{field_name} must be an integer")
    if value < minimum:
        raise ValidationFailed(f"{field_name} must be at least {minimum}")
    return value


def _drills(values: Optional[Iterable[str]]) -> frozenset:
    if values is None:
        return frozenset(DEFAULT_DRILLS)
    drills = frozenset(v.strip().upper() for v in values if v and v.strip())
    if not drills:
        raise ValidationFailed("at least one drill must be enabled")
    return drills


def validate_event(event: Event) -> Event:
    """Check catalog field rules, raising ``ValidationFailed``."""
    name = (event.name or "").strip()
    if not name:
        raise ValidationFailed("name is required")
    if event.location_type not in LOCATION_TYPES:
        raise ValidationFailed(f"location_type must be one of {', '.join(LOCATION_TYPES)}")
    return dataclasses.replace(
        event,
        name=name,
        fee_credits=_whole(event.fee_credits, "fee_credits", 0),
        capacity=_whole(event.capacity, "capacity", 1),
        prize_pool_credits=_whole(event.prize_pool_credits, "prize_pool_credits", 0),
        schedule=_as_utc(event.schedule),
    )


class EventService:
    """Service for managing events."""

    def __init__(self, store: MemoryStore) -> None:
        self._store = store

    async def create_event(self, data: EventCreate) -> Event:
        """Create a new event and return it."""
        event = validate_event(
            Event(
                id=new_event_id(),
                name=data.name,
                fee_credits=data.fee_credits,
                capacity=data.capacity if data.capacity is not None else settings.default_capacity,
                location_type=data.location_type,
                schedule=data.schedule or utcnow(),
                drills_enabled=_drills(data.drills_enabled),
                prize_pool_credits=data.prize_pool_credits,
            )
        )
        self._store.events[event.id] = event
        logger.info("Created event %s '%s' (fee %d, capacity %d)", event.id, event.name, event.fee_credits, event.capacity)
        return event

    async def list_events(self) -> List[Event]:
        """Return all events, most recently scheduled first."""
        return sorted(self._store.events.values(), key=lambda e: e.schedule, reverse=True)

    async def get_event(self, event_id: str) -> Event:
        """Return one event or raise ``NotFound``."""
        event = self._store.events.get(event_id)
        if event is None:
            raise NotFound("Event", event_id)
        return event

    async def update_event(self, event_id: str, updates: Dict[str, Any]) -> Event:
        """Apply a partial update.

        Keys outside the updatable fields are rejected.  Lowering the
        capacity below the number of admitted users is allowed; further
        joins then fail as full.
        """
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationFailed(f"cannot update field(s): {', '.join(sorted(unknown))}")
        async with self._store.locked(event_key(event_id)):
            current = await self.get_event(event_id)
            changes = dict(updates)
            if "drills_enabled" in changes:
                changes["drills_enabled"] = _drills(changes["drills_enabled"])
            updated = validate_event(dataclasses.replace(current, **changes))
            self._store.events[event_id] = updated
        logger.info("Updated event %s: %s", event_id, ", ".join(sorted(updates)) or "no changes")
        return updated

    async def delete_event(self, event_id: str) -> None:
        """Delete an event with its registrations and drill submissions.

        Ledger history is left untouched.
        """
        async with self._store.locked(event_key(event_id)):
            await self.get_event(event_id)
            del self._store.events[event_id]
            self._store.registrations.pop(event_id, None)
            self._store.mix_cache.pop(event_id, None)
            self._store.submissions.pop(event_id, None)
        logger.info("Deleted event %s", event_id)
