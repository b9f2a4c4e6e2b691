"""JIRA task, capacity and prediction models."""

from datetime import date, datetime
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator


class TaskPriority(str, Enum):
    """JIRA priority names."""
    HIGHEST = "Highest"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    LOWEST = "Lowest"


class RiskLevel(str, Enum):
    """Risk bucket for a completion prediction."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Statuses that take a task out of capacity planning
CLOSED_STATUSES = ("Done", "Closed")


class JiraTask(BaseModel):
    """A JIRA issue synced for a user. Identity is (user_id, jira_key)."""

    id: Optional[str] = None
    user_id: str
    jira_key: str
    jira_id: str = ""
    summary: str = ""
    status: str = "To Do"
    # Kept as a plain string: JIRA instances may define extra priority names
    priority: Optional[str] = None
    estimate_hours: Optional[float] = None
    story_points: Optional[float] = None
    due_date: Optional[date] = None
    assignee: Optional[str] = None
    project_key: str = ""
    labels: List[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @field_validator("labels", mode="before")
    @classmethod
    def default_labels(cls, v):
        return v or []

    @property
    def is_active(self) -> bool:
        return self.status not in CLOSED_STATUSES


class CapacityCalculation(BaseModel):
    """Result of a single-day capacity calculation."""
    total_hours: float
    meeting_hours: float
    context_switching_minutes: int
    available_hours: float
    tasks_count: int
    completable_tasks_count: int


class DailyCapacity(BaseModel):
    """Persisted capacity for one (user, date)."""

    id: Optional[str] = None
    user_id: str
    date: date
    total_hours: float = 8.0
    meeting_hours: float = 0.0
    context_switching_minutes: int = 0
    available_hours: float = 0.0
    tasks_count: int = 0
    completable_tasks_count: int = 0

    model_config = {"from_attributes": True}


class TaskCompletionPrediction(BaseModel):
    """Completion forecast for one task in one week."""

    id: Optional[str] = None
    task_id: str
    user_id: str
    week_start_date: date
    completion_probability: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    estimated_completion_date: Optional[date] = None
    blockers: List[str] = Field(default_factory=list)
    calculated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("blockers", mode="before")
    @classmethod
    def default_blockers(cls, v):
        return v or []


class PredictionSummary(BaseModel):
    """Aggregate counts over a week's predictions."""
    total_tasks: int = 0
    likely_complete: int = 0
    at_risk: int = 0
    unlikely: int = 0


class WeeklyPrediction(BaseModel):
    """Predictor output: per-task predictions in allocation order plus summary."""
    predictions: List[TaskCompletionPrediction] = Field(default_factory=list)
    summary: PredictionSummary = Field(default_factory=PredictionSummary)
