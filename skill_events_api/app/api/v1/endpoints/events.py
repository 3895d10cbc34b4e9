"""
Event endpoints for API v1.

These routes provide CRUD operations for the event catalog.  Listing
and reading events is public; creating, updating and deleting events
requires an administrator.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from skill_events_api.app.api.deps import get_event_service
from skill_events_api.app.core.errors import NotFound
from skill_events_api.app.core.security import require_admin
from skill_events_api.app.schemas.event import EventCreate, EventRead, EventUpdate
from skill_events_api.app.services.event_service import EventService


router = APIRouter()


@router.post("/", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: EventCreate,
    service: EventService = Depends(get_event_service),
    current_user: dict = Depends(require_admin),
) -> EventRead:
    """Create a new event (admin only)."""
    try:
        created = await service.create_event(event)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return EventRead.from_record(created)


@router.get("/", response_model=List[EventRead])
async def list_events(service: EventService = Depends(get_event_service)) -> List[EventRead]:
    """List all events, most recently scheduled first."""
    return [EventRead.from_record(e) for e in await service.list_events()]


@router.get("/{event_id}", response_model=EventRead)
async def get_event(event_id: str, service: EventService = Depends(get_event_service)) -> EventRead:
    """Retrieve a single event by its ID.  Raises 404 if it does not exist."""
    try:
        return EventRead.from_record(await service.get_event(event_id))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: str,
    updates: EventUpdate,
    service: EventService = Depends(get_event_service),
    current_user: dict = Depends(require_admin),
) -> EventRead:
    """Update an existing event (admin only).

    Partial updates are supported; any unspecified fields remain
    unchanged.
    """
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return EventRead.from_record(await service.update_event(event_id, update_dict))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    service: EventService = Depends(get_event_service),
    current_user: dict = Depends(require_admin),
) -> None:
    """Delete an event together with its registrations (admin only).

    Credits charged for joining are not refunded.
    """
    try:
        await service.delete_event(event_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
