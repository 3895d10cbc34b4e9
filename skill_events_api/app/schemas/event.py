"""
Pydantic models for event data.

These schemas define the structure of event data exchanged via the
API.  ``EventCreate`` is the request body for new events, ``EventUpdate``
is a partial patch, and ``EventRead`` is returned by every event route.
Fees, capacities and prize pools are whole credits.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from skill_events_api.app.core.records import Event


LocationType = Literal["in_person", "online"]


class EventCreate(BaseModel):
    """Schema for creating an event.

    Omitted fields take the catalog defaults: in-person, scheduled now,
    all standard drills enabled, free entry and the configured default
    capacity.
    """

    name: str = Field(..., min_length=1, examples=["Ball Skill - Saturday Qualifier"])
    fee_credits: int = Field(0, ge=0, examples=[30])
    capacity: Optional[int] = Field(None, ge=1, examples=[16])
    location_type: LocationType = "in_person"
    schedule: Optional[datetime] = Field(None, examples=["2025-09-01T10:00:00Z"])
    drills_enabled: Optional[List[str]] = Field(None, examples=[["3PT", "FT"]])
    prize_pool_credits: int = Field(0, ge=0, examples=[500])


class EventUpdate(BaseModel):
    """Schema for updating an event.

    All fields are optional; only provided fields will be updated.
    """

    name: Optional[str] = Field(None, min_length=1)
    fee_credits: Optional[int] = Field(None, ge=0)
    capacity: Optional[int] = Field(None, ge=1)
    location_type: Optional[LocationType] = None
    schedule: Optional[datetime] = None
    drills_enabled: Optional[List[str]] = None
    prize_pool_credits: Optional[int] = Field(None, ge=0)


class EventRead(BaseModel):
    """Schema for reading an event from the API."""

    id: str
    name: str
    fee_credits: int
    capacity: int
    location_type: LocationType
    schedule: datetime
    drills_enabled: List[str]
    prize_pool_credits: int

    @classmethod
    def from_record(cls, event: Event) -> "EventRead":
        return cls(
            id=event.id,
            name=event.name,
            fee_credits=event.fee_credits,
            capacity=event.capacity,
            location_type=event.location_type,
            schedule=event.schedule,
            drills_enabled=sorted(event.drills_enabled),
            prize_pool_credits=event.prize_pool_credits,
        )
