"""
Repository for weekly challenges and achievements.
"""

import logging
from datetime import date
from typing import Optional, List

from sqlalchemy import select, and_
from sqlalchemy.exc import IntegrityError

from ..connection import get_database
from ..models import WeeklyChallengeDB, AchievementDB
from ..exceptions import DatabaseConstraintError, EntityNotFoundError
from ...models.gamification import WeeklyChallenge, Achievement
from ...utils.datetime_utils import get_utc_now

logger = logging.getLogger(__name__)


def _challenge_values(challenge: WeeklyChallenge) -> dict:
    return {
        "target_criteria": challenge.target_criteria.value,
        "goal_description": challenge.goal_description,
        "target_percentage": challenge.target_percentage,
        "current_progress": challenge.current_progress,
        "meetings_completed": challenge.meetings_completed,
        "total_meetings": challenge.total_meetings,
        "status": challenge.status.value,
        "counted_meeting_ids": list(challenge.counted_meeting_ids),
    }


class GamificationRepository:
    """Repository for challenge and achievement operations."""

    def __init__(self):
        self.db = get_database()

    async def get_challenge(self, user_id: str, week_start: date) -> Optional[WeeklyChallenge]:
        """Get the user's challenge for the week starting at week_start."""
        async with self.db.session() as session:
            result = await session.execute(
                select(WeeklyChallengeDB).where(
                    and_(
                        WeeklyChallengeDB.user_id == user_id,
                        WeeklyChallengeDB.week_start_date == week_start,
                    )
                )
            )
            row = result.scalar_one_or_none()
            return WeeklyChallenge.model_validate(row) if row else None

    async def create_challenge(self, challenge: WeeklyChallenge) -> WeeklyChallenge:
        """
        Insert a new challenge.

        Raises:
            DatabaseConstraintError: the user already has a challenge that week
        """
        async with self.db.session() as session:
            row = WeeklyChallengeDB(
                user_id=challenge.user_id,
                week_start_date=challenge.week_start_date,
                created_at=get_utc_now(),
                **_challenge_values(challenge),
            )
            session.add(row)

            try:
                await session.flush()
            except IntegrityError as e:
                logger.error(f"Duplicate challenge for {challenge.user_id} week {challenge.week_start_date}: {e}")
                raise DatabaseConstraintError(
                    f"Challenge for week {challenge.week_start_date} already exists"
                )

            logger.info(
                f"Created {challenge.target_criteria.value} challenge for {challenge.user_id} "
                f"week {challenge.week_start_date}"
            )
            return WeeklyChallenge.model_validate(row)

    async def save_challenge(self, challenge: WeeklyChallenge) -> WeeklyChallenge:
        """Persist progress of an existing challenge."""
        async with self.db.session() as session:
            result = await session.execute(
                select(WeeklyChallengeDB).where(WeeklyChallengeDB.id == challenge.id)
            )
            row = result.scalar_one_or_none()
            if not row:
                raise EntityNotFoundError(f"Challenge {challenge.id} not found")

            for key, value in _challenge_values(challenge).items():
                setattr(row, key, value)

            await session.flush()
            return WeeklyChallenge.model_validate(row)

    async def create_achievement(self, achievement: Achievement) -> Achievement:
        """Record an earned achievement."""
        async with self.db.session() as session:
            row = AchievementDB(
                user_id=achievement.user_id,
                type=achievement.type,
                title=achievement.title,
                description=achievement.description,
                icon_name=achievement.icon_name,
                earned_at=achievement.earned_at or get_utc_now(),
            )
            session.add(row)
            await session.flush()

            logger.info(f"Achievement '{achievement.title}' earned by {achievement.user_id}")
            return Achievement.model_validate(row)

    async def get_achievements(self, user_id: str) -> List[Achievement]:
        """Get a user's achievements, newest first."""
        async with self.db.session() as session:
            result = await session.execute(
                select(AchievementDB)
                .where(AchievementDB.user_id == user_id)
                .order_by(AchievementDB.earned_at.desc())
            )
            return [Achievement.model_validate(row) for row in result.scalars().all()]


_gamification_repository: Optional[GamificationRepository] = None


def get_gamification_repository() -> GamificationRepository:
    """Get the gamification repository singleton."""
    global _gamification_repository
    if _gamification_repository is None:
        _gamification_repository = GamificationRepository()
    return _gamification_repository
