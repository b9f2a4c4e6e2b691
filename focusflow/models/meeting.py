"""Meeting and meeting score models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ScoreCriteria(str, Enum):
    """The five scored dimensions of a meeting."""
    AGENDA = "agenda"
    PARTICIPANTS = "participants"
    TIMING = "timing"
    ACTIONS = "actions"
    ATTENTION = "attention"


class Meeting(BaseModel):
    """A calendar meeting owned by a user."""

    id: str
    user_id: str
    google_event_id: str = ""
    title: str = ""
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    participants: int = Field(default=0, ge=0)
    google_doc_id: Optional[str] = None
    last_synced: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @property
    def duration_minutes(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 60

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / 60


class ScoringFactors(BaseModel):
    """Inputs to the meeting score calculator."""
    title: str = ""
    has_agenda: bool = False
    agenda_length: int = 0
    agenda_topics_count: int = 0
    participants: int = 0
    duration_minutes: float = 0
    action_items_count: int = 0
    attention_points_count: int = 0
    has_accountability: bool = False
    has_deadlines: bool = False


class MeetingScoreResult(BaseModel):
    """Five sub-scores (0-20 each) and their total (0-100)."""
    agenda_score: int = 0
    participants_score: int = 0
    timing_score: int = 0
    actions_score: int = 0
    attention_score: int = 0
    total_score: int = 0

    def criteria_score(self, criteria: ScoreCriteria) -> int:
        return getattr(self, f"{ScoreCriteria(criteria).value}_score")


class MeetingScore(MeetingScoreResult):
    """Persisted score, one per meeting."""

    id: Optional[str] = None
    meeting_id: str
    calculated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
