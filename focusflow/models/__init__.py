from .meeting import Meeting, MeetingScore, MeetingScoreResult, ScoringFactors, ScoreCriteria
from .task import (
    JiraTask,
    TaskPriority,
    RiskLevel,
    CLOSED_STATUSES,
    CapacityCalculation,
    DailyCapacity,
    TaskCompletionPrediction,
    PredictionSummary,
    WeeklyPrediction,
)
from .gamification import WeeklyChallenge, ChallengeStatus, Achievement
from .user_settings import UserSettings

__all__ = [
    "Meeting",
    "MeetingScore",
    "MeetingScoreResult",
    "ScoringFactors",
    "ScoreCriteria",
    "JiraTask",
    "TaskPriority",
    "RiskLevel",
    "CLOSED_STATUSES",
    "CapacityCalculation",
    "DailyCapacity",
    "TaskCompletionPrediction",
    "PredictionSummary",
    "WeeklyPrediction",
    "WeeklyChallenge",
    "ChallengeStatus",
    "Achievement",
    "UserSettings",
]
