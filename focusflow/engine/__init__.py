"""
Capacity, prediction, scoring and challenge engine.

Pure computations over in-memory records. Nothing here performs I/O.
"""

from .capacity import (
    estimate_task_hours,
    sort_tasks_for_allocation,
    calculate_daily_capacity,
    meetings_on_day,
)
from .prediction import predict_weekly_completion
from .scoring import calculate_meeting_score, build_scoring_factors, score_meeting
from .text_analysis import (
    extract_agenda_from_description,
    extract_keywords_from_notes,
    extract_google_doc_id,
    extract_text_from_doc,
    is_generic_title,
)
from .gamification import (
    select_target_criteria,
    build_weekly_challenge,
    describe_challenge,
    generate_weekly_challenge,
    apply_meeting_score,
    build_achievement,
)

__all__ = [
    "estimate_task_hours",
    "sort_tasks_for_allocation",
    "calculate_daily_capacity",
    "meetings_on_day",
    "predict_weekly_completion",
    "calculate_meeting_score",
    "build_scoring_factors",
    "score_meeting",
    "extract_agenda_from_description",
    "extract_keywords_from_notes",
    "extract_google_doc_id",
    "extract_text_from_doc",
    "is_generic_title",
    "select_target_criteria",
    "build_weekly_challenge",
    "describe_challenge",
    "generate_weekly_challenge",
    "apply_meeting_score",
    "build_achievement",
]
