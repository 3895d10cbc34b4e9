"""
Drill submission and leaderboard endpoints for API v1.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from skill_events_api.app.api.deps import get_submission_service
from skill_events_api.app.core.errors import NotFound
from skill_events_api.app.schemas.submission import (
    DrillResultRead,
    Leaderboard,
    LeaderboardRow,
    SubmissionCreate,
    SubmissionRead,
)
from skill_events_api.app.services.submission_service import SubmissionService


router = APIRouter()


@router.post("/events/{event_id}/submissions", response_model=SubmissionRead)
async def submit_drill(
    event_id: str,
    payload: SubmissionCreate,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionRead:
    """Record a drill result; returns all of the user's results for the event."""
    try:
        results = await service.submit(
            event_id,
            payload.email,
            payload.drill_type,
            made=payload.made,
            attempts=payload.attempts,
            time_ms=payload.time_ms,
            verified_by=payload.verified_by,
        )
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return SubmissionRead(submission={k: DrillResultRead.from_record(v) for k, v in results.items()})


@router.get("/events/{event_id}/leaderboard", response_model=Leaderboard)
async def get_leaderboard(event_id: str, service: SubmissionService = Depends(get_submission_service)) -> Leaderboard:
    """Rank players by total made shots, then by lowest total time."""
    try:
        rows = await service.leaderboard(event_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return Leaderboard(leaderboard=[LeaderboardRow(**row) for row in rows])
