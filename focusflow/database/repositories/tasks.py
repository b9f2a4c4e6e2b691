"""
Repository for JIRA tasks, daily capacities and weekly predictions.

Tasks are keyed by (user, jira key), capacities by (user, date) and
predictions by (task, week start). Saving under an existing key replaces
the stored values.
"""

import logging
from datetime import date, timedelta
from typing import Optional, List

from sqlalchemy import select, delete, and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..connection import get_database
from ..models import JiraTaskDB, DailyCapacityDB, TaskPredictionDB
from ..exceptions import DatabaseConstraintError, DatabaseOperationError
from ...models.task import (
    JiraTask,
    DailyCapacity,
    CapacityCalculation,
    TaskCompletionPrediction,
)
from ...utils.datetime_utils import get_utc_now

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for task planning data."""

    def __init__(self):
        self.db = get_database()

    # ==================== TASKS ====================

    async def upsert_task(self, task: JiraTask) -> JiraTask:
        """Create or update a task by (user_id, jira_key)."""
        values = {
            "jira_id": task.jira_id,
            "summary": task.summary,
            "status": task.status,
            "priority": task.priority,
            "estimate_hours": task.estimate_hours,
            "story_points": task.story_points,
            "due_date": task.due_date,
            "assignee": task.assignee,
            "project_key": task.project_key,
            "labels": list(task.labels),
            "synced_at": get_utc_now(),
        }

        async with self.db.session() as session:
            result = await session.execute(
                select(JiraTaskDB).where(
                    and_(
                        JiraTaskDB.user_id == task.user_id,
                        JiraTaskDB.jira_key == task.jira_key,
                    )
                )
            )
            existing = result.scalar_one_or_none()

            if existing:
                for key, value in values.items():
                    setattr(existing, key, value)
                row = existing
            else:
                row = JiraTaskDB(user_id=task.user_id, jira_key=task.jira_key, **values)
                session.add(row)

            try:
                await session.flush()
            except IntegrityError as e:
                logger.error(f"Constraint violation upserting task {task.jira_key}: {e}")
                raise DatabaseConstraintError(f"Cannot save task {task.jira_key}")

            return JiraTask.model_validate(row)

    async def get_tasks(self, user_id: str, status: Optional[str] = None) -> List[JiraTask]:
        """Get a user's tasks, optionally filtered by status."""
        async with self.db.session() as session:
            query = select(JiraTaskDB).where(JiraTaskDB.user_id == user_id)
            if status:
                query = query.where(JiraTaskDB.status == status)
            query = query.order_by(JiraTaskDB.jira_key)

            try:
                result = await session.execute(query)
            except SQLAlchemyError as e:
                logger.error(f"Error fetching tasks for {user_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to fetch tasks for {user_id}") from e
            return [JiraTask.model_validate(row) for row in result.scalars().all()]

    # ==================== CAPACITY ====================

    async def upsert_capacity(
        self,
        user_id: str,
        day: date,
        calculation: CapacityCalculation,
    ) -> DailyCapacity:
        """Store the capacity for (user_id, day), replacing any earlier one."""
        values = calculation.model_dump()
        values["calculated_at"] = get_utc_now()

        async with self.db.session() as session:
            result = await session.execute(
                select(DailyCapacityDB).where(
                    and_(
                        DailyCapacityDB.user_id == user_id,
                        DailyCapacityDB.date == day,
                    )
                )
            )
            existing = result.scalar_one_or_none()

            if existing:
                for key, value in values.items():
                    setattr(existing, key, value)
                row = existing
            else:
                row = DailyCapacityDB(user_id=user_id, date=day, **values)
                session.add(row)

            try:
                await session.flush()
            except IntegrityError as e:
                logger.error(f"Constraint violation saving capacity {user_id}/{day}: {e}")
                raise DatabaseConstraintError(f"Cannot save capacity for {day}")

            return DailyCapacity.model_validate(row)

    async def get_capacities_for_week(self, user_id: str, week_start: date) -> List[DailyCapacity]:
        """Get stored capacities for the 7 days from week_start, ordered by date."""
        week_end = week_start + timedelta(days=6)

        async with self.db.session() as session:
            result = await session.execute(
                select(DailyCapacityDB)
                .where(
                    and_(
                        DailyCapacityDB.user_id == user_id,
                        DailyCapacityDB.date >= week_start,
                        DailyCapacityDB.date <= week_end,
                    )
                )
                .order_by(DailyCapacityDB.date)
            )
            return [DailyCapacity.model_validate(row) for row in result.scalars().all()]

    # ==================== PREDICTIONS ====================

    async def delete_predictions_for_week(self, user_id: str, week_start: date) -> int:
        """Remove a user's predictions for a week. Returns the number deleted."""
        async with self.db.session() as session:
            result = await session.execute(
                delete(TaskPredictionDB).where(
                    and_(
                        TaskPredictionDB.user_id == user_id,
                        TaskPredictionDB.week_start_date == week_start,
                    )
                )
            )
            deleted = result.rowcount or 0
            if deleted:
                logger.info(f"Cleared {deleted} stale predictions for {user_id} week {week_start}")
            return deleted

    async def upsert_prediction(self, prediction: TaskCompletionPrediction) -> TaskCompletionPrediction:
        """Store a prediction keyed by (task_id, week_start_date)."""
        values = {
            "user_id": prediction.user_id,
            "completion_probability": prediction.completion_probability,
            "risk_level": prediction.risk_level.value,
            "estimated_completion_date": prediction.estimated_completion_date,
            "blockers": list(prediction.blockers),
            "calculated_at": get_utc_now(),
        }

        async with self.db.session() as session:
            result = await session.execute(
                select(TaskPredictionDB).where(
                    and_(
                        TaskPredictionDB.task_id == prediction.task_id,
                        TaskPredictionDB.week_start_date == prediction.week_start_date,
                    )
                )
            )
            existing = result.scalar_one_or_none()

            if existing:
                for key, value in values.items():
                    setattr(existing, key, value)
                row = existing
            else:
                row = TaskPredictionDB(
                    task_id=prediction.task_id,
                    week_start_date=prediction.week_start_date,
                    **values,
                )
                session.add(row)

            try:
                await session.flush()
            except IntegrityError as e:
                logger.error(f"Constraint violation saving prediction for {prediction.task_id}: {e}")
                raise DatabaseConstraintError(f"Cannot save prediction for task {prediction.task_id}")

            return TaskCompletionPrediction.model_validate(row)

    async def get_predictions(self, user_id: str, week_start: date) -> List[TaskCompletionPrediction]:
        """Get a user's predictions for a week."""
        async with self.db.session() as session:
            result = await session.execute(
                select(TaskPredictionDB)
                .where(
                    and_(
                        TaskPredictionDB.user_id == user_id,
                        TaskPredictionDB.week_start_date == week_start,
                    )
                )
                .order_by(TaskPredictionDB.completion_probability.desc())
            )
            return [TaskCompletionPrediction.model_validate(row) for row in result.scalars().all()]


_task_repository: Optional[TaskRepository] = None


def get_task_repository() -> TaskRepository:
    """Get the task repository singleton."""
    global _task_repository
    if _task_repository is None:
        _task_repository = TaskRepository()
    return _task_repository
