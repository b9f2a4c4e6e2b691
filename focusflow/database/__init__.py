"""
PostgreSQL database module for FocusFlow.

Handles:
- User settings and integration credentials
- Meetings synced from Google Calendar and their scores
- JIRA tasks, daily capacities and weekly predictions
- Weekly challenges and achievements
"""

from .connection import (
    get_database,
    Database,
    init_database,
    close_database,
)
from .models import (
    Base,
    UserSettingsDB,
    MeetingDB,
    MeetingScoreDB,
    JiraTaskDB,
    DailyCapacityDB,
    TaskPredictionDB,
    WeeklyChallengeDB,
    AchievementDB,
)
from .exceptions import (
    DatabaseError,
    DatabaseConnectionError,
    DatabaseConstraintError,
    DatabaseOperationError,
    EntityNotFoundError,
)

__all__ = [
    "get_database",
    "Database",
    "init_database",
    "close_database",
    "Base",
    "UserSettingsDB",
    "MeetingDB",
    "MeetingScoreDB",
    "JiraTaskDB",
    "DailyCapacityDB",
    "TaskPredictionDB",
    "WeeklyChallengeDB",
    "AchievementDB",
    "DatabaseError",
    "DatabaseConnectionError",
    "DatabaseConstraintError",
    "DatabaseOperationError",
    "EntityNotFoundError",
]
