"""
Meeting and meeting score repository.

Meetings are keyed by their Google Calendar event id. Each meeting has at
most one score; rescoring replaces it in place.
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..connection import get_database
from ..models import MeetingDB, MeetingScoreDB
from ..exceptions import DatabaseConstraintError, DatabaseOperationError, EntityNotFoundError
from ...models.meeting import Meeting, MeetingScore, MeetingScoreResult
from ...utils.datetime_utils import get_utc_now, to_naive_utc

logger = logging.getLogger(__name__)


class MeetingRepository:
    """Repository for meetings and their scores."""

    def __init__(self):
        self.db = get_database()

    async def upsert(self, meeting: Meeting) -> Meeting:
        """Create or update a meeting by id."""
        values = {
            "user_id": meeting.user_id,
            "google_event_id": meeting.google_event_id or meeting.id,
            "title": meeting.title,
            "description": meeting.description,
            "start_time": to_naive_utc(meeting.start_time),
            "end_time": to_naive_utc(meeting.end_time),
            "participants": meeting.participants,
            "last_synced": get_utc_now(),
        }

        async with self.db.session() as session:
            result = await session.execute(
                select(MeetingDB).where(MeetingDB.id == meeting.id)
            )
            existing = result.scalar_one_or_none()

            if existing:
                for key, value in values.items():
                    setattr(existing, key, value)
                # Calendar resyncs must not drop a manually linked doc
                if meeting.google_doc_id:
                    existing.google_doc_id = meeting.google_doc_id
                row = existing
            else:
                row = MeetingDB(id=meeting.id, google_doc_id=meeting.google_doc_id, **values)
                session.add(row)

            try:
                await session.flush()
            except IntegrityError as e:
                logger.error(f"Constraint violation upserting meeting {meeting.id}: {e}")
                raise DatabaseConstraintError(f"Cannot save meeting {meeting.id}")

            return Meeting.model_validate(row)

    async def get(self, meeting_id: str) -> Optional[Meeting]:
        """Get a meeting by id."""
        async with self.db.session() as session:
            result = await session.execute(
                select(MeetingDB).where(MeetingDB.id == meeting_id)
            )
            row = result.scalar_one_or_none()
            return Meeting.model_validate(row) if row else None

    async def get_by_user(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Meeting]:
        """Get a user's meetings, optionally within [start, end], ordered by start time."""
        async with self.db.session() as session:
            query = select(MeetingDB).where(MeetingDB.user_id == user_id)
            if start is not None:
                query = query.where(MeetingDB.start_time >= to_naive_utc(start))
            if end is not None:
                query = query.where(MeetingDB.start_time <= to_naive_utc(end))
            query = query.order_by(MeetingDB.start_time)

            try:
                result = await session.execute(query)
            except SQLAlchemyError as e:
                logger.error(f"Error fetching meetings for {user_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to fetch meetings for {user_id}") from e
            return [Meeting.model_validate(row) for row in result.scalars().all()]

    async def link_document(self, meeting_id: str, google_doc_id: str) -> Meeting:
        """Attach a Google Doc to a meeting."""
        async with self.db.session() as session:
            result = await session.execute(
                select(MeetingDB).where(MeetingDB.id == meeting_id)
            )
            row = result.scalar_one_or_none()
            if not row:
                raise EntityNotFoundError(f"Meeting {meeting_id} not found")

            row.google_doc_id = google_doc_id
            await session.flush()
            logger.info(f"Linked doc {google_doc_id} to meeting {meeting_id}")
            return Meeting.model_validate(row)

    async def upsert_score(self, meeting_id: str, score: MeetingScoreResult) -> MeetingScore:
        """Replace the meeting's score, creating it if missing."""
        values = {
            "agenda_score": score.agenda_score,
            "participants_score": score.participants_score,
            "timing_score": score.timing_score,
            "actions_score": score.actions_score,
            "attention_score": score.attention_score,
            "total_score": score.total_score,
            "calculated_at": get_utc_now(),
        }

        async with self.db.session() as session:
            result = await session.execute(
                select(MeetingScoreDB).where(MeetingScoreDB.meeting_id == meeting_id)
            )
            existing = result.scalar_one_or_none()

            if existing:
                for key, value in values.items():
                    setattr(existing, key, value)
                row = existing
            else:
                row = MeetingScoreDB(meeting_id=meeting_id, **values)
                session.add(row)

            try:
                await session.flush()
            except IntegrityError as e:
                logger.error(f"Constraint violation scoring meeting {meeting_id}: {e}")
                raise DatabaseConstraintError(f"Cannot save score for meeting {meeting_id}")

            return MeetingScore.model_validate(row)

    async def get_scores_for_meetings(self, meeting_ids: Iterable[str]) -> Dict[str, MeetingScore]:
        """Get scores keyed by meeting id. Unscored meetings are absent."""
        ids = list(meeting_ids)
        if not ids:
            return {}

        async with self.db.session() as session:
            try:
                result = await session.execute(
                    select(MeetingScoreDB).where(MeetingScoreDB.meeting_id.in_(ids))
                )
            except SQLAlchemyError as e:
                logger.error(f"Error fetching scores for {len(ids)} meetings: {e}", exc_info=True)
                raise DatabaseOperationError("Failed to fetch meeting scores") from e
            return {
                row.meeting_id: MeetingScore.model_validate(row)
                for row in result.scalars().all()
            }


_meeting_repository: Optional[MeetingRepository] = None


def get_meeting_repository() -> MeetingRepository:
    """Get the meeting repository singleton."""
    global _meeting_repository
    if _meeting_repository is None:
        _meeting_repository = MeetingRepository()
    return _meeting_repository
