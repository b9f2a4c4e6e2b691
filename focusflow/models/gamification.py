"""Weekly challenge and achievement models."""

from datetime import date, datetime
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from .meeting import ScoreCriteria


class ChallengeStatus(str, Enum):
    """Challenge lifecycle states."""
    ACTIVE = "active"
    COMPLETED = "completed"
    # No transition sets this yet
    FAILED = "failed"


class WeeklyChallenge(BaseModel):
    """A per-user, per-week improvement goal targeting one score criterion."""

    id: Optional[str] = None
    user_id: str
    week_start_date: date
    target_criteria: ScoreCriteria
    goal_description: str
    target_percentage: int = 80
    current_progress: int = 0
    meetings_completed: int = 0
    total_meetings: int = 0
    status: ChallengeStatus = ChallengeStatus.ACTIVE
    counted_meeting_ids: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("counted_meeting_ids", mode="before")
    @classmethod
    def default_counted_ids(cls, v):
        return v or []


class Achievement(BaseModel):
    """An earned badge. Append-only."""

    id: Optional[str] = None
    user_id: str
    type: str = "challenge_complete"
    title: str
    description: str
    icon_name: str = "Trophy"
    earned_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
