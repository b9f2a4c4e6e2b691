"""
Services for business logic.
"""

from .challenges import ChallengeService, get_challenge_service
from .meetings import MeetingService, get_meeting_service
from .tasks import TaskService, get_task_service

__all__ = [
    "ChallengeService",
    "get_challenge_service",
    "MeetingService",
    "get_meeting_service",
    "TaskService",
    "get_task_service",
]
