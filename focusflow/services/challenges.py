"""
Weekly challenge service.

Handles business logic for:
- Creating the week's challenge from the last two weeks of meeting scores
- Counting scored meetings toward the current challenge
- Awarding achievements when a challenge completes
"""

import logging
from datetime import date, timedelta
from typing import Optional, List, Tuple

from config import settings
from ..database.repositories.gamification import get_gamification_repository, GamificationRepository
from ..database.repositories.meetings import get_meeting_repository, MeetingRepository
from ..engine.gamification import apply_meeting_score, generate_weekly_challenge
from ..models.gamification import WeeklyChallenge, Achievement
from ..models.meeting import MeetingScoreResult
from ..utils.datetime_utils import get_local_now, get_week_start

logger = logging.getLogger(__name__)


class ChallengeService:
    """Service for weekly challenge operations."""

    def __init__(self):
        self.repo: GamificationRepository = get_gamification_repository()
        self.meetings: MeetingRepository = get_meeting_repository()

    async def _recent_scores(self, user_id: str) -> List[MeetingScoreResult]:
        now = get_local_now()
        since = now - timedelta(days=settings.challenge_lookback_days)
        meetings = await self.meetings.get_by_user(user_id, start=since, end=now)
        scores = await self.meetings.get_scores_for_meetings(m.id for m in meetings)
        return list(scores.values())

    async def generate(self, user_id: str, today: Optional[date] = None) -> WeeklyChallenge:
        """
        Create this week's challenge targeting the weakest recent criterion.

        A challenge that already has counted meetings is returned unchanged;
        an untouched one is re-targeted from the latest scores.
        """
        week_start = get_week_start(today)
        recent = await self._recent_scores(user_id)
        fresh = generate_weekly_challenge(user_id, week_start, recent)

        existing = await self.repo.get_challenge(user_id, week_start)
        if existing is None:
            return await self.repo.create_challenge(fresh)

        if existing.counted_meeting_ids:
            logger.info(f"Keeping in-progress challenge {existing.id} for {user_id}")
            return existing

        retargeted = existing.model_copy(update={
            "target_criteria": fresh.target_criteria,
            "goal_description": fresh.goal_description,
        })
        return await self.repo.save_challenge(retargeted)

    async def get_current(self, user_id: str, today: Optional[date] = None) -> WeeklyChallenge:
        """Get this week's challenge, generating it on first access."""
        challenge = await self.repo.get_challenge(user_id, get_week_start(today))
        if challenge is None:
            challenge = await self.generate(user_id, today)
        return challenge

    async def update_progress(
        self,
        user_id: str,
        meeting_id: str,
        score: MeetingScoreResult,
        today: Optional[date] = None,
    ) -> Tuple[Optional[WeeklyChallenge], Optional[Achievement]]:
        """
        Count a scored meeting toward this week's challenge.

        Does nothing when the user has no challenge this week or the meeting
        was already counted.
        """
        challenge = await self.repo.get_challenge(user_id, get_week_start(today))
        if challenge is None:
            return None, None

        updated, achievement = apply_meeting_score(challenge, meeting_id, score)
        if updated is challenge:
            return challenge, None

        updated = await self.repo.save_challenge(updated)
        if achievement is not None:
            achievement = await self.repo.create_achievement(achievement)

        return updated, achievement

    async def list_achievements(self, user_id: str) -> List[Achievement]:
        """Get the user's earned achievements."""
        return await self.repo.get_achievements(user_id)


_challenge_service: Optional[ChallengeService] = None


def get_challenge_service() -> ChallengeService:
    """Get the challenge service singleton."""
    global _challenge_service
    if _challenge_service is None:
        _challenge_service = ChallengeService()
    return _challenge_service
