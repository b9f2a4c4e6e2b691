"""
Weekly challenge engine.

Picks the user's weakest score criterion as the week's challenge, tracks
how many meetings pass it, and awards an achievement once the target is
met. A meeting counts toward a challenge at most once, however often its
score is recomputed.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Optional, Tuple

from ..models.gamification import Achievement, ChallengeStatus, WeeklyChallenge
from ..models.meeting import MeetingScoreResult, ScoreCriteria

logger = logging.getLogger(__name__)


DEFAULT_TARGET_PERCENTAGE = 80
# 75% of the 20-point maximum
PASSING_CRITERIA_SCORE = 15
MIN_MEETINGS_FOR_COMPLETION = 5
ACHIEVEMENT_TYPE = "challenge_complete"


@dataclass(frozen=True)
class ChallengeTemplate:
    description: str
    tip: str
    icon: str


@dataclass(frozen=True)
class AchievementTemplate:
    title: str
    description: str
    icon: str


CHALLENGES: Dict[ScoreCriteria, ChallengeTemplate] = {
    ScoreCriteria.AGENDA: ChallengeTemplate(
        description="Add detailed agendas to 80% of your meetings",
        tip="Include clear objectives and discussion points before meetings",
        icon="FileText",
    ),
    ScoreCriteria.PARTICIPANTS: ChallengeTemplate(
        description="Keep 80% of meetings to 3-10 participants",
        tip="Small, focused meetings are more effective",
        icon="Users",
    ),
    ScoreCriteria.TIMING: ChallengeTemplate(
        description="Schedule 80% of meetings between 30-45 minutes",
        tip="The sweet spot for productive discussions",
        icon="Clock",
    ),
    ScoreCriteria.ACTIONS: ChallengeTemplate(
        description="Document action items in 80% of meeting notes",
        tip="Turn discussions into accountable next steps",
        icon="CheckSquare",
    ),
    ScoreCriteria.ATTENTION: ChallengeTemplate(
        description="Highlight key points in 80% of meeting notes",
        tip="Make important decisions easy to find",
        icon="Star",
    ),
}

ACHIEVEMENTS: Dict[ScoreCriteria, AchievementTemplate] = {
    ScoreCriteria.AGENDA: AchievementTemplate(
        "Agenda Master", "Completed the agenda challenge!", "Trophy"),
    ScoreCriteria.PARTICIPANTS: AchievementTemplate(
        "Team Size Pro", "Mastered the ideal meeting size!", "Award"),
    ScoreCriteria.TIMING: AchievementTemplate(
        "Time Optimizer", "Optimized your meeting durations!", "Medal"),
    ScoreCriteria.ACTIONS: AchievementTemplate(
        "Action Hero", "Champion of actionable outcomes!", "Zap"),
    ScoreCriteria.ATTENTION: AchievementTemplate(
        "Highlight Champion", "Expert at capturing key points!", "Sparkles"),
}


def average_criteria_scores(scores: Iterable[MeetingScoreResult]) -> Dict[ScoreCriteria, float]:
    """Average each criterion across the given scores. Empty input yields {}."""
    totals = {criteria: 0.0 for criteria in ScoreCriteria}
    count = 0
    for score in scores:
        for criteria in ScoreCriteria:
            totals[criteria] += score.criteria_score(criteria)
        count += 1

    if count == 0:
        return {}
    return {criteria: total / count for criteria, total in totals.items()}


def select_target_criteria(scores: Iterable[MeetingScoreResult]) -> ScoreCriteria:
    """
    Pick the criterion with the lowest average.

    Ties go to the criterion listed last in ScoreCriteria; no scores at
    all means the agenda challenge.
    """
    averages = average_criteria_scores(scores)
    if not averages:
        return ScoreCriteria.AGENDA

    weakest = ScoreCriteria.AGENDA
    for criteria in ScoreCriteria:
        if averages[criteria] <= averages[weakest]:
            weakest = criteria
    return weakest


def build_weekly_challenge(
    user_id: str,
    week_start: date,
    criteria: ScoreCriteria = ScoreCriteria.AGENDA,
    target_percentage: int = DEFAULT_TARGET_PERCENTAGE,
) -> WeeklyChallenge:
    """Create a fresh active challenge for `criteria`."""
    return WeeklyChallenge(
        user_id=user_id,
        week_start_date=week_start,
        target_criteria=criteria,
        goal_description=CHALLENGES[criteria].description,
        target_percentage=target_percentage,
    )


def describe_challenge(challenge: WeeklyChallenge) -> Dict[str, Any]:
    """Serialize a challenge with the tip and icon shown on its card."""
    template = CHALLENGES[challenge.target_criteria]
    data = challenge.model_dump(mode="json")
    data["tip"] = template.tip
    data["icon_name"] = template.icon
    return data


def generate_weekly_challenge(
    user_id: str,
    week_start: date,
    recent_scores: Iterable[MeetingScoreResult],
) -> WeeklyChallenge:
    """Build the week's challenge from the user's recent meeting scores."""
    criteria = select_target_criteria(recent_scores)
    logger.info(f"Weekly challenge for {user_id} ({week_start}): {criteria.value}")
    return build_weekly_challenge(user_id, week_start, criteria)


def build_achievement(user_id: str, criteria: ScoreCriteria) -> Achievement:
    """Achievement awarded for completing a `criteria` challenge."""
    template = ACHIEVEMENTS.get(criteria)
    if template is None:
        template = AchievementTemplate("Challenge Complete", "Completed a weekly challenge!", "Trophy")
    return Achievement(
        user_id=user_id,
        type=ACHIEVEMENT_TYPE,
        title=template.title,
        description=template.description,
        icon_name=template.icon,
    )


def apply_meeting_score(
    challenge: WeeklyChallenge,
    meeting_id: str,
    score: MeetingScoreResult,
) -> Tuple[WeeklyChallenge, Optional[Achievement]]:
    """
    Count one scored meeting toward a challenge.

    Returns the (possibly unchanged) challenge and, when this meeting
    completes it, the achievement to award. The input challenge is not
    modified.
    """
    if challenge.status != ChallengeStatus.ACTIVE:
        return challenge, None
    if meeting_id in challenge.counted_meeting_ids:
        return challenge, None

    passes = score.criteria_score(challenge.target_criteria) >= PASSING_CRITERIA_SCORE

    total_meetings = challenge.total_meetings + 1
    meetings_completed = challenge.meetings_completed + (1 if passes else 0)
    # Half-up rounding, 12.5 -> 13
    current_progress = math.floor(meetings_completed * 100 / total_meetings + 0.5)

    updated = challenge.model_copy(update={
        "total_meetings": total_meetings,
        "meetings_completed": meetings_completed,
        "current_progress": current_progress,
        "counted_meeting_ids": [*challenge.counted_meeting_ids, meeting_id],
    })

    achievement = None
    if (total_meetings >= MIN_MEETINGS_FOR_COMPLETION
            and current_progress >= challenge.target_percentage):
        updated = updated.model_copy(update={"status": ChallengeStatus.COMPLETED})
        achievement = build_achievement(challenge.user_id, challenge.target_criteria)
        logger.info(
            f"Challenge {challenge.target_criteria.value} completed by {challenge.user_id} "
            f"({meetings_completed}/{total_meetings} meetings)"
        )

    return updated, achievement
