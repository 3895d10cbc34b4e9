"""
Registration endpoints for API v1.

These routes let a user join an event with wallet credits, check
whether they are already admitted, and expose the derived player-type
mix and (for administrators) the participant list.  The heavy lifting
happens in ``RegistrationService.join_event``.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, status
from fastapi.responses import JSONResponse

from skill_events_api.app.api.deps import get_event_service, get_registration_service, get_registry
from skill_events_api.app.core.errors import NotFound
from skill_events_api.app.core.security import require_admin
from skill_events_api.app.schemas.registration import (
    JoinRequest,
    JoinResultRead,
    ParticipantList,
    RegistrationRead,
    RegistrationStatus,
    TypeMixRead,
)
from skill_events_api.app.services.event_service import EventService
from skill_events_api.app.services.registration_service import (
    FailureReason,
    JoinStatus,
    RegistrationService,
)
from skill_events_api.app.services.registry_service import RegistryService


router = APIRouter()

FAILURE_STATUS_CODES = {
    FailureReason.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureReason.EVENT_FULL: status.HTTP_409_CONFLICT,
    FailureReason.INSUFFICIENT_CREDITS: status.HTTP_402_PAYMENT_REQUIRED,
}


@router.post(
    "/events/{event_id}/join",
    response_model=JoinResultRead,
    responses={402: {"model": JoinResultRead}, 404: {"model": JoinResultRead}, 409: {"model": JoinResultRead}},
)
async def join_event(
    payload: JoinRequest,
    event_id: str = Path(..., description="ID of the event to join"),
    service: RegistrationService = Depends(get_registration_service),
):
    """Join an event, paying its fee in credits.

    Joining twice is safe: the second call reports ``already_joined``
    and charges nothing.  Failed joins return the result body with
    404 (unknown event), 409 (event full) or 402 (not enough credits).

    ``fee`` overrides the event fee for this join and is taken from the
    caller as-is; deployments that expose this route directly to end
    users should strip it at the gateway.
    """
    try:
        result = await service.join_event(event_id, payload.email, profile_tag=payload.tag, fee_override=payload.fee)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    body = JoinResultRead.from_result(result)
    if result.status is JoinStatus.FAILED:
        return JSONResponse(
            status_code=FAILURE_STATUS_CODES[result.reason],
            content=body.model_dump(mode="json"),
        )
    return body


@router.get("/events/{event_id}/registration/{email}", response_model=RegistrationStatus)
async def registration_status(
    event_id: str,
    email: str,
    registry: RegistryService = Depends(get_registry),
) -> RegistrationStatus:
    """Report whether the user is admitted to the event."""
    try:
        return RegistrationStatus(joined=await registry.is_admitted(event_id, email))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e


@router.get("/events/{event_id}/mix", response_model=TypeMixRead)
async def player_type_mix(
    event_id: str,
    events: EventService = Depends(get_event_service),
    registry: RegistryService = Depends(get_registry),
) -> TypeMixRead:
    """Return the share of each player type among admitted users."""
    try:
        event = await events.get_event(event_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return TypeMixRead(
        mix=await registry.type_mix(event_id),
        admitted=await registry.admitted_count(event_id),
        capacity=event.capacity,
    )


@router.get("/events/{event_id}/participants", response_model=ParticipantList)
async def list_participants(
    event_id: str,
    events: EventService = Depends(get_event_service),
    registry: RegistryService = Depends(get_registry),
    current_user: dict = Depends(require_admin),
) -> ParticipantList:
    """List admitted users in admission order (admin only)."""
    try:
        await events.get_event(event_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    regs = await registry.list_registrations(event_id)
    return ParticipantList(participants=[RegistrationRead.from_record(r) for r in regs])
