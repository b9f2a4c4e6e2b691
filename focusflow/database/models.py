"""
SQLAlchemy models for PostgreSQL database.

Schema includes:
- User settings (capacity preferences, integration credentials)
- Meetings synced from Google Calendar and their scores
- JIRA tasks, daily capacities and weekly completion predictions
- Weekly challenges and achievements
"""

import uuid
from datetime import datetime, date
from typing import Optional, List
from sqlalchemy import (
    String,
    Text,
    Integer,
    DateTime,
    Date,
    Float,
    ForeignKey,
    JSON,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ==================== USERS ====================

class UserSettingsDB(Base):
    """Per-user capacity preferences and integration credentials."""
    __tablename__ = "user_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    daily_work_hours: Mapped[float] = mapped_column(Float, default=8.0)
    context_switching_minutes: Mapped[int] = mapped_column(Integer, default=20)

    jira_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    jira_api_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    jira_host: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    jira_jql_query: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    google_access_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    google_refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    google_token_expiry: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())


# ==================== MEETINGS ====================

class MeetingDB(Base):
    """Calendar meeting. The id is the Google Calendar event id."""
    __tablename__ = "meetings"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    google_event_id: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Stored as naive UTC
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    participants: Mapped[int] = mapped_column(Integer, default=0)
    google_doc_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_synced: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_meetings_user_start", "user_id", "start_time"),
    )


class MeetingScoreDB(Base):
    """Score of a meeting. At most one per meeting."""
    __tablename__ = "meeting_scores"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    meeting_id: Mapped[str] = mapped_column(String(255), ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False)

    agenda_score: Mapped[int] = mapped_column(Integer, default=0)
    participants_score: Mapped[int] = mapped_column(Integer, default=0)
    timing_score: Mapped[int] = mapped_column(Integer, default=0)
    actions_score: Mapped[int] = mapped_column(Integer, default=0)
    attention_score: Mapped[int] = mapped_column(Integer, default=0)
    total_score: Mapped[int] = mapped_column(Integer, default=0)

    calculated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("meeting_id", name="uq_meeting_scores_meeting"),
    )


# ==================== JIRA ====================

class JiraTaskDB(Base):
    """JIRA issue synced for a user."""
    __tablename__ = "jira_tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    jira_key: Mapped[str] = mapped_column(String(50), nullable=False)
    jira_id: Mapped[str] = mapped_column(String(50), default="")

    summary: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(50), default="To Do")
    priority: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    estimate_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    story_points: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    assignee: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    project_key: Mapped[str] = mapped_column(String(50), default="")
    labels: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)

    synced_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "jira_key", name="uq_jira_tasks_user_key"),
        Index("idx_jira_tasks_user_status", "user_id", "status"),
    )


class DailyCapacityDB(Base):
    """Capacity of one user on one day."""
    __tablename__ = "daily_capacities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)

    total_hours: Mapped[float] = mapped_column(Float, default=8.0)
    meeting_hours: Mapped[float] = mapped_column(Float, default=0.0)
    context_switching_minutes: Mapped[int] = mapped_column(Integer, default=0)
    available_hours: Mapped[float] = mapped_column(Float, default=0.0)
    tasks_count: Mapped[int] = mapped_column(Integer, default=0)
    completable_tasks_count: Mapped[int] = mapped_column(Integer, default=0)

    calculated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_capacities_user_date"),
    )


class TaskPredictionDB(Base):
    """Completion prediction for a task in a given week."""
    __tablename__ = "task_predictions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    task_id: Mapped[str] = mapped_column(String(36), ForeignKey("jira_tasks.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)

    completion_probability: Mapped[int] = mapped_column(Integer, default=0)
    risk_level: Mapped[str] = mapped_column(String(10), default="high")
    estimated_completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    blockers: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)

    calculated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("task_id", "week_start_date", name="uq_task_predictions_task_week"),
        Index("idx_task_predictions_user_week", "user_id", "week_start_date"),
    )


# ==================== GAMIFICATION ====================

class WeeklyChallengeDB(Base):
    """Per-user weekly improvement challenge."""
    __tablename__ = "weekly_challenges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)

    target_criteria: Mapped[str] = mapped_column(String(20), nullable=False)
    goal_description: Mapped[str] = mapped_column(Text, nullable=False)
    target_percentage: Mapped[int] = mapped_column(Integer, default=80)
    current_progress: Mapped[int] = mapped_column(Integer, default=0)
    meetings_completed: Mapped[int] = mapped_column(Integer, default=0)
    total_meetings: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(20), default="active")  # active, completed, failed
    counted_meeting_ids: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "week_start_date", name="uq_weekly_challenges_user_week"),
    )


class AchievementDB(Base):
    """Earned achievement. Append-only."""
    __tablename__ = "achievements"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    icon_name: Mapped[str] = mapped_column(String(50), default="Trophy")
    earned_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_achievements_user", "user_id"),
    )
