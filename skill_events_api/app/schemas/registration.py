"""
Pydantic models for joining events and admission data.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from skill_events_api.app.core.records import Registration
from skill_events_api.app.services.registration_service import JoinResult


class JoinRequest(BaseModel):
    email: str = Field(..., min_length=1, examples=["a@x.com"])
    tag: Optional[str] = Field(None, examples=["teen"], description="Player type of the joining user")
    fee: Optional[int] = Field(None, ge=0, description="Fee override in credits")


class JoinResultRead(BaseModel):
    status: Literal["joined", "already_joined", "failed"]
    balance: int
    credits_charged: Optional[int] = None
    reason: Optional[str] = None
    required: Optional[int] = None

    @classmethod
    def from_result(cls, result: JoinResult) -> "JoinResultRead":
        return cls(
            status=result.status.value,
            balance=result.balance,
            credits_charged=result.credits_charged,
            reason=result.reason.value if result.reason else None,
            required=result.required,
        )


class RegistrationStatus(BaseModel):
    joined: bool


class RegistrationRead(BaseModel):
    event_id: str
    user_id: str
    credits_charged: int
    admitted_at: datetime
    tag: str

    @classmethod
    def from_record(cls, reg: Registration) -> "RegistrationRead":
        return cls(
            event_id=reg.event_id,
            user_id=reg.user_id,
            credits_charged=reg.credits_charged,
            admitted_at=reg.admitted_at,
            tag=reg.tag,
        )


class TypeMixRead(BaseModel):
    mix: Dict[str, float]
    admitted: int
    capacity: int


class ParticipantList(BaseModel):
    participants: List[RegistrationRead]
