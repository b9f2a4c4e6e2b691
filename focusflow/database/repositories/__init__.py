"""
Repository classes for database operations.

Each repository handles CRUD and upsert-by-key queries for its entity type.
"""

from .meetings import MeetingRepository, get_meeting_repository
from .tasks import TaskRepository, get_task_repository
from .gamification import GamificationRepository, get_gamification_repository
from .user_settings import UserSettingsRepository, get_user_settings_repository

__all__ = [
    "MeetingRepository",
    "get_meeting_repository",
    "TaskRepository",
    "get_task_repository",
    "GamificationRepository",
    "get_gamification_repository",
    "UserSettingsRepository",
    "get_user_settings_repository",
]
