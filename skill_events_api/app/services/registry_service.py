"""
Business logic for event admissions.

The ``RegistryService`` owns the authoritative answer to "is this user
admitted to this event" and the derived player-type mix for each
event.  Admission is an insert-if-absent on the ``(event, user)`` pair
performed while holding the event lock, so a pair can never be
admitted twice and an event can never exceed its capacity.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional

from skill_events_api.app.core.config import settings
from skill_events_api.app.core.errors import CapacityExceeded, Conflict, InvalidTag
from skill_events_api.app.core.records import PLAYER_TAGS, Event, Registration, utcnow
from skill_events_api.app.core.store import MemoryStore, event_key, normalize_user_id
from skill_events_api.app.services.event_service import EventService


logger = logging.getLogger(__name__)


def resolve_tag(tag: Optional[str]) -> str:
    """Return the canonical player tag, falling back to the default."""
    if tag is None or not tag.strip():
        tag = settings.default_player_tag
    canonical = tag.strip().lower()
    if canonical not in PLAYER_TAGS:
        raise InvalidTag(f"unknown player type '{tag}', expected one of {', '.join(PLAYER_TAGS)}")
    return canonical


class RegistryService:
    """Service for per-event admission sets."""

    def __init__(self, store: MemoryStore, events: EventService) -> None:
        self._store = store
        self._events = events

    async def is_admitted(self, event_id: str, user_id: str) -> bool:
        regs = self._store.registrations.get(event_id, {})
        return normalize_user_id(user_id) in regs

    async def admitted_count(self, event_id: str) -> int:
        return len(self._store.registrations.get(event_id, {}))

    async def admit(self, event_id: str, user_id: str, credits_charged: int, tag: Optional[str] = None) -> Registration:
        """Admit a user to an event.

        Raises ``NotFound`` for unknown events, ``Conflict`` if the pair
        is already admitted and ``CapacityExceeded`` if the event is
        full.  Does not touch the ledger; paid admissions go through
        ``RegistrationService.join_event``.
        """
        uid = normalize_user_id(user_id)
        resolved = resolve_tag(tag)
        async with self._store.locked(event_key(event_id)):
            event = await self._events.get_event(event_id)
            return self.admit_locked(event, uid, credits_charged, resolved)

    def admit_locked(self, event: Event, user_id: str, credits_charged: int, tag: str) -> Registration:
        """Insert the registration if absent.

        The caller must hold the ``event:<id>`` lock and pass a
        normalized user id and resolved tag.
        """
        regs = self._store.event_registrations(event.id)
        if user_id in regs:
            raise Conflict(f"{user_id} is already admitted to event {event.id}")
        if len(regs) >= event.capacity:
            raise CapacityExceeded(f"event {event.id} is full ({event.capacity} places)")
        registration = Registration(
            event_id=event.id,
            user_id=user_id,
            credits_charged=credits_charged,
            admitted_at=utcnow(),
            tag=tag,
        )
        regs[user_id] = registration
        self._store.mix_cache.pop(event.id, None)
        logger.info("Admitted %s to event %s as %s (%d/%d)", user_id, event.id, tag, len(regs), event.capacity)
        return registration

    async def type_mix(self, event_id: str) -> Dict[str, float]:
        """Return the share of each player type among admitted users.

        Fractions sum to 1; the mapping is empty when nobody has been
        admitted.  Results are cached until the next admission.
        """
        cached = self._store.mix_cache.get(event_id)
        if cached is not None:
            return dict(cached)
        regs = self._store.registrations.get(event_id, {})
        counts = Counter(reg.tag for reg in regs.values())
        total = sum(counts.values())
        mix = {tag: count / total for tag, count in counts.items()} if total else {}
        self._store.mix_cache[event_id] = mix
        return dict(mix)

    async def list_registrations(self, event_id: str) -> List[Registration]:
        """Return registrations for an event in admission order."""
        return list(self._store.registrations.get(event_id, {}).values())
