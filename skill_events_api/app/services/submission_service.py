"""
Drill results and event leaderboards.

Players submit one result per drill type; a new submission for the
same drill replaces the previous one.  The leaderboard ranks players
by the total number of made shots across drills, breaking ties by the
lowest total time.
"""

import logging
from typing import Dict, List, Optional

from skill_events_api.app.core.errors import ValidationFailed
from skill_events_api.app.core.records import DrillResult, utcnow
from skill_events_api.app.core.store import MemoryStore, event_key, normalize_user_id
from skill_events_api.app.services.event_service import EventService


logger = logging.getLogger(__name__)


class SubmissionService:
    """Service for drill submissions and leaderboards."""

    def __init__(self, store: MemoryStore, events: EventService) -> None:
        self._store = store
        self._events = events

    async def submit(
        self,
        event_id: str,
        user_id: str,
        drill_type: str,
        made: int,
        attempts: int = 10,
        time_ms: Optional[int] = None,
        verified_by: Optional[str] = None,
    ) -> Dict[str, DrillResult]:
        """Record a drill result and return all of the user's results for the event.

        Raises ``NotFound`` for unknown events and ``ValidationFailed``
        when the drill is not enabled or ``made`` is outside
        ``0..attempts``.
        """
        uid = normalize_user_id(user_id)
        drill = (drill_type or "").strip().upper()
        if attempts < 1:
            raise ValidationFailed("attempts must be at least 1")
        if made < 0 or made > attempts:
            raise ValidationFailed("made must be between 0 and attempts")
        if time_ms is not None and time_ms < 0:
            raise ValidationFailed("time_ms must not be negative")

        async with self._store.locked(event_key(event_id)):
            event = await self._events.get_event(event_id)
            if drill not in event.drills_enabled:
                raise ValidationFailed(f"drill '{drill_type}' is not enabled for event {event_id}")
            by_user = self._store.submissions.setdefault(event_id, {})
            by_drill = by_user.setdefault(uid, {})
            by_drill[drill] = DrillResult(
                made=made,
                attempts=attempts,
                time_ms=time_ms,
                verified_by=verified_by,
                created_at=utcnow(),
            )
            logger.info("Recorded %s %d/%d for %s in event %s", drill, made, attempts, uid, event_id)
            return dict(by_drill)

    async def leaderboard(self, event_id: str) -> List[dict]:
        """Return ranking rows ``{email, total_made, total_time_ms}``."""
        await self._events.get_event(event_id)
        rows = []
        for uid, by_drill in self._store.submissions.get(event_id, {}).items():
            total_made = sum(r.made for r in by_drill.values())
            total_time = sum(r.time_ms for r in by_drill.values() if r.time_ms is not None)
            rows.append({"email": uid, "total_made": total_made, "total_time_ms": total_time})
        rows.sort(key=lambda row: (-row["total_made"], row["total_time_ms"]))
        return rows
