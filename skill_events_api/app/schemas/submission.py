"""
Pydantic models for drill submissions and leaderboards.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from skill_events_api.app.core.records import DrillResult


class SubmissionCreate(BaseModel):
    email: str = Field(..., min_length=1, examples=["a@x.com"])
    drill_type: str = Field(..., min_length=1, examples=["3PT"])
    made: int = Field(..., examples=[7])
    attempts: int = Field(10, examples=[10])
    time_ms: Optional[int] = Field(None, examples=[41250])
    verified_by: Optional[str] = Field(None, examples=["coach@x.com"])


class DrillResultRead(BaseModel):
    made: int
    attempts: int
    time_ms: Optional[int] = None
    verified_by: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_record(cls, result: DrillResult) -> "DrillResultRead":
        return cls(
            made=result.made,
            attempts=result.attempts,
            time_ms=result.time_ms,
            verified_by=result.verified_by,
            created_at=result.created_at,
        )


class SubmissionRead(BaseModel):
    submission: Dict[str, DrillResultRead]


class LeaderboardRow(BaseModel):
    email: str
    total_made: int
    total_time_ms: int


class Leaderboard(BaseModel):
    leaderboard: List[LeaderboardRow]
