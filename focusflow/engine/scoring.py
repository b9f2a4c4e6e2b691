"""
Meeting score calculator.

Scores a meeting 0-100 across five criteria worth 20 points each:
agenda, participants, timing, actions and attention.
"""

import logging
from typing import Optional

from ..models.meeting import Meeting, MeetingScoreResult, ScoringFactors
from .text_analysis import (
    extract_agenda_from_description,
    extract_keywords_from_notes,
    is_generic_title,
)

logger = logging.getLogger(__name__)


MAX_CRITERIA_SCORE = 20

# Too many unrelated topics dilute focus
MAX_FOCUSED_TOPICS = 5
TOPICS_PENALTY = 5
SPECIFIC_TITLE_MIN_LENGTH = 20
SPECIFIC_TITLE_BONUS = 3
NO_AGENDA_SPECIFIC_TITLE_SCORE = 5

ACCOUNTABILITY_BONUS = 3
DEADLINE_BONUS = 2


def calculate_agenda_score(
    title: str,
    has_agenda: bool,
    agenda_length: int,
    topics_count: int = 0,
) -> int:
    """Score the agenda, 0-20."""
    title = (title or "").strip()
    generic = is_generic_title(title)

    if not has_agenda or agenda_length <= 0:
        if generic or not title:
            return 0
        return NO_AGENDA_SPECIFIC_TITLE_SCORE

    if agenda_length < 50:
        score = 8
    elif agenda_length < 150:
        score = 15
    elif agenda_length < 300:
        score = 20
    else:
        score = 18  # verbose

    if topics_count > MAX_FOCUSED_TOPICS:
        score = max(0, score - TOPICS_PENALTY)

    if not generic and len(title) >= SPECIFIC_TITLE_MIN_LENGTH:
        score = min(MAX_CRITERIA_SCORE, score + SPECIFIC_TITLE_BONUS)

    return score


def calculate_participants_score(count: int) -> int:
    """Score the attendee count, 0-20. Oversized meetings lose points."""
    if count <= 0:
        return 0
    if count <= 2:
        return 10
    if count <= 5:
        return 16
    if count <= 10:
        return 20
    if count <= 15:
        return 18
    return 14


def calculate_timing_score(minutes: float) -> int:
    """Score the duration, 0-20. 31-60 minutes is optimal."""
    if minutes <= 0:
        return 0
    if minutes <= 15:
        return 12
    if minutes <= 30:
        return 18
    if minutes <= 60:
        return 20
    if minutes <= 90:
        return 14
    if minutes <= 120:
        return 8
    return 5


def calculate_actions_score(count: int, has_accountability: bool = False, has_deadlines: bool = False) -> int:
    """Score action items, 0-20, with bonuses for owners and deadlines."""
    if count <= 0:
        return 5

    if count <= 2:
        score = 12
    elif count <= 5:
        score = 18
    elif count <= 10:
        score = 20
    else:
        score = 16

    if has_accountability:
        score += ACCOUNTABILITY_BONUS
    if has_deadlines:
        score += DEADLINE_BONUS

    return min(MAX_CRITERIA_SCORE, score)


def calculate_attention_score(count: int) -> int:
    """Score highlighted attention points, 0-20."""
    if count <= 0:
        return 8
    if count <= 2:
        return 14
    if count <= 5:
        return 20
    if count <= 8:
        return 18
    return 16


def calculate_meeting_score(factors: ScoringFactors) -> MeetingScoreResult:
    """
    Score a meeting from its factors.

    Returns:
        MeetingScoreResult with five sub-scores and their sum
    """
    agenda = calculate_agenda_score(
        factors.title,
        factors.has_agenda,
        factors.agenda_length,
        factors.agenda_topics_count,
    )
    participants = calculate_participants_score(factors.participants)
    timing = calculate_timing_score(factors.duration_minutes)
    actions = calculate_actions_score(
        factors.action_items_count,
        factors.has_accountability,
        factors.has_deadlines,
    )
    attention = calculate_attention_score(factors.attention_points_count)

    return MeetingScoreResult(
        agenda_score=agenda,
        participants_score=participants,
        timing_score=timing,
        actions_score=actions,
        attention_score=attention,
        total_score=agenda + participants + timing + actions + attention,
    )


def build_scoring_factors(meeting: Meeting, notes: Optional[str] = None) -> ScoringFactors:
    """
    Derive scoring factors from a meeting and, when available, its notes.

    Without notes the action and attention counts are zero.
    """
    agenda = extract_agenda_from_description(meeting.description)
    notes_info = extract_keywords_from_notes(notes)

    return ScoringFactors(
        title=meeting.title,
        has_agenda=agenda.has_agenda,
        agenda_length=agenda.length,
        agenda_topics_count=agenda.topics_count,
        participants=meeting.participants,
        duration_minutes=meeting.duration_minutes,
        action_items_count=notes_info.action_items,
        attention_points_count=notes_info.attention_points,
        has_accountability=notes_info.has_accountability,
        has_deadlines=notes_info.has_deadlines,
    )


def score_meeting(meeting: Meeting, notes: Optional[str] = None) -> MeetingScoreResult:
    """Score a meeting straight from its record and optional notes."""
    result = calculate_meeting_score(build_scoring_factors(meeting, notes))
    logger.debug(f"Scored meeting {meeting.id}: {result.total_score}/100")
    return result
