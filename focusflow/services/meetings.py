"""
Meeting service.

Handles business logic for:
- Syncing meetings from Google Calendar and giving them an initial score
- Rescoring a meeting once its notes document is linked
- Score statistics with a per-weekday trend
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, List, Iterable

from ..database.exceptions import EntityNotFoundError
from ..database.repositories.meetings import get_meeting_repository, MeetingRepository
from ..database.repositories.user_settings import get_user_settings_repository, UserSettingsRepository
from ..engine.scoring import score_meeting
from ..engine.text_analysis import extract_keywords_from_notes
from ..integrations.calendar import GoogleCalendarClient
from ..integrations.google_docs import GoogleDocsClient
from ..models.meeting import Meeting, MeetingScore
from ..utils.datetime_utils import get_local_now, get_local_tz, to_aware_utc
from .challenges import get_challenge_service, ChallengeService

logger = logging.getLogger(__name__)

DEFAULT_SYNC_DAYS = 7
NOTES_PREVIEW_CHARS = 500


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def build_score_trend(meetings: Iterable[Meeting], scores: Dict[str, MeetingScore]) -> List[Dict[str, Any]]:
    """
    Average total score per weekday, in order of first appearance.

    Unscored meetings count with a score of 0.
    """
    tz = get_local_tz()
    groups: Dict[str, Dict[str, int]] = {}

    for meeting in meetings:
        weekday = to_aware_utc(meeting.start_time).astimezone(tz).strftime("%a")
        score = scores.get(meeting.id)
        group = groups.setdefault(weekday, {"total": 0, "count": 0})
        group["total"] += score.total_score if score else 0
        group["count"] += 1

    return [
        {
            "date": weekday,
            "score": _round_half_up(data["total"] / data["count"]),
            "meetings": data["count"],
        }
        for weekday, data in groups.items()
    ]


class MeetingService:
    """Service for meeting operations."""

    def __init__(self):
        self.repo: MeetingRepository = get_meeting_repository()
        self.settings_repo: UserSettingsRepository = get_user_settings_repository()
        self.challenges: ChallengeService = get_challenge_service()

    async def _google_token(self, user_id: str) -> Optional[str]:
        user_settings = await self.settings_repo.get(user_id)
        return user_settings.google_access_token if user_settings else None

    async def sync_calendar(
        self,
        user_id: str,
        time_min: Optional[datetime] = None,
        time_max: Optional[datetime] = None,
    ) -> List[Meeting]:
        """
        Import calendar events in [time_min, time_max] (default: the next 7 days).

        Each meeting gets an initial score from its calendar data alone and
        is counted toward the current challenge.
        """
        time_min = time_min or get_local_now()
        time_max = time_max or time_min + timedelta(days=DEFAULT_SYNC_DAYS)

        client = GoogleCalendarClient(await self._google_token(user_id))
        synced = []

        for meeting in await client.list_meetings(user_id, time_min, time_max):
            saved = await self.repo.upsert(meeting)
            score = score_meeting(saved)
            await self.repo.upsert_score(saved.id, score)
            await self.challenges.update_progress(user_id, saved.id, score)
            synced.append(saved)

        logger.info(f"Synced {len(synced)} meetings for {user_id}")
        return synced

    async def analyze_document(self, user_id: str, meeting_id: str, google_doc_id: str) -> Dict[str, Any]:
        """
        Link a notes document to a meeting and rescore it with the notes.

        Raises:
            EntityNotFoundError: no such meeting for this user
        """
        meeting = await self.repo.get(meeting_id)
        if meeting is None or meeting.user_id != user_id:
            raise EntityNotFoundError(f"Meeting {meeting_id} not found")

        meeting = await self.repo.link_document(meeting_id, google_doc_id)

        client = GoogleDocsClient(await self._google_token(user_id))
        content = await client.get_document_text(google_doc_id)

        score = score_meeting(meeting, content)
        saved_score = await self.repo.upsert_score(meeting_id, score)
        await self.challenges.update_progress(user_id, meeting_id, score)

        notes = extract_keywords_from_notes(content)
        logger.info(
            f"Analyzed doc {google_doc_id} for meeting {meeting_id}: "
            f"{notes.action_items} actions, {notes.attention_points} highlights, "
            f"score {score.total_score}"
        )

        return {
            "meeting": meeting,
            "score": saved_score,
            "content": content[:NOTES_PREVIEW_CHARS],
        }

    async def list_meetings(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """Meetings in range, each paired with its score (or None)."""
        meetings = await self.repo.get_by_user(user_id, start, end)
        scores = await self.repo.get_scores_for_meetings(m.id for m in meetings)
        return [{"meeting": m, "score": scores.get(m.id)} for m in meetings]

    async def get_stats(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Meeting count, rounded average score of scored meetings and weekday trend."""
        meetings = await self.repo.get_by_user(user_id, start, end)
        scores = await self.repo.get_scores_for_meetings(m.id for m in meetings)

        average = 0
        if scores:
            average = _round_half_up(sum(s.total_score for s in scores.values()) / len(scores))

        return {
            "total_meetings": len(meetings),
            "average_score": average,
            "trend_data": build_score_trend(meetings, scores),
        }


_meeting_service: Optional[MeetingService] = None


def get_meeting_service() -> MeetingService:
    """Get the meeting service singleton."""
    global _meeting_service
    if _meeting_service is None:
        _meeting_service = MeetingService()
    return _meeting_service
