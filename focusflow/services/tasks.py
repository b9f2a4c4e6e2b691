"""
Task planning service.

Handles business logic for:
- Syncing JIRA issues
- Daily capacity from meetings, open tasks and the user's preferences
- Weekly completion predictions
"""

import logging
from datetime import date
from typing import Optional, Dict, Any, List, Tuple

from config import settings
from ..database.repositories.meetings import get_meeting_repository, MeetingRepository
from ..database.repositories.tasks import get_task_repository, TaskRepository
from ..database.repositories.user_settings import get_user_settings_repository, UserSettingsRepository
from ..engine.capacity import calculate_daily_capacity
from ..engine.prediction import predict_weekly_completion
from ..integrations.jira import JiraClient
from ..models.task import JiraTask, DailyCapacity, TaskCompletionPrediction
from ..models.user_settings import UserSettings
from ..utils.datetime_utils import day_bounds, get_local_today, get_week_start, week_days

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task, capacity and prediction operations."""

    def __init__(self):
        self.repo: TaskRepository = get_task_repository()
        self.meetings: MeetingRepository = get_meeting_repository()
        self.settings_repo: UserSettingsRepository = get_user_settings_repository()

    async def _capacity_preferences(self, user_id: str) -> Tuple[float, int]:
        user_settings = await self.settings_repo.get(user_id)
        if user_settings is None:
            return settings.daily_work_hours, settings.context_switching_minutes
        return user_settings.daily_work_hours, user_settings.context_switching_minutes

    async def _active_tasks(self, user_id: str) -> List[JiraTask]:
        return [t for t in await self.repo.get_tasks(user_id) if t.is_active]

    async def _store_capacity(
        self,
        user_id: str,
        day: date,
        tasks: List[JiraTask],
        preferences: Tuple[float, int],
    ) -> DailyCapacity:
        work_day_hours, switching_minutes = preferences
        start, end = day_bounds(day)
        meetings = await self.meetings.get_by_user(user_id, start, end)

        calculation = calculate_daily_capacity(
            day,
            meetings,
            tasks,
            work_day_hours=work_day_hours,
            context_switching_minutes=switching_minutes,
        )
        return await self.repo.upsert_capacity(user_id, day, calculation)

    async def sync_jira(self, user_id: str) -> List[JiraTask]:
        """
        Import the user's JIRA issues.

        Raises:
            IntegrationNotConfiguredError: no JIRA credentials for this user
            ExternalAPIError: JIRA rejected the search
        """
        user_settings: Optional[UserSettings] = await self.settings_repo.get(user_id)
        client = JiraClient.from_user_settings(user_settings)
        jql = (user_settings.jira_jql_query if user_settings else None) or settings.jira_jql_query

        synced = [await self.repo.upsert_task(task) for task in await client.fetch_tasks(user_id, jql)]
        logger.info(f"Synced {len(synced)} JIRA tasks for {user_id}")
        return synced

    async def get_tasks(self, user_id: str, status: Optional[str] = None) -> List[JiraTask]:
        """Get the user's synced tasks."""
        return await self.repo.get_tasks(user_id, status)

    async def calculate_capacity(self, user_id: str, day: Optional[date] = None) -> DailyCapacity:
        """Compute and store capacity for `day` (default: today)."""
        day = day or get_local_today()
        tasks = await self._active_tasks(user_id)
        preferences = await self._capacity_preferences(user_id)
        capacity = await self._store_capacity(user_id, day, tasks, preferences)
        logger.info(f"Capacity for {user_id} on {day}: {capacity.available_hours:.2f}h available")
        return capacity

    async def get_week_capacity(self, user_id: str, week_start: Optional[date] = None) -> List[DailyCapacity]:
        """Stored capacities of the week containing `week_start`."""
        return await self.repo.get_capacities_for_week(user_id, get_week_start(week_start))

    async def predict_week(self, user_id: str, week_start: Optional[date] = None) -> Dict[str, Any]:
        """
        Predict completion of the user's open tasks for a week.

        Stored capacities are reused; when the week has none, all seven
        days are calculated and stored first. Predictions from earlier runs
        for the same week are replaced.
        """
        week_start = get_week_start(week_start)
        tasks = await self._active_tasks(user_id)

        capacities = await self.repo.get_capacities_for_week(user_id, week_start)
        if not capacities:
            preferences = await self._capacity_preferences(user_id)
            capacities = [
                await self._store_capacity(user_id, day, tasks, preferences)
                for day in week_days(week_start)
            ]

        result = predict_weekly_completion(week_start, tasks, capacities)

        await self.repo.delete_predictions_for_week(user_id, week_start)
        saved = [await self.repo.upsert_prediction(p) for p in result.predictions]

        tasks_by_id = {t.id or t.jira_key: t for t in tasks}
        return {
            "week_start": week_start,
            "summary": result.summary,
            "predictions": [
                {"prediction": p, "task": tasks_by_id.get(p.task_id)}
                for p in saved
            ],
        }

    async def get_predictions(self, user_id: str, week_start: Optional[date] = None) -> List[TaskCompletionPrediction]:
        """Stored predictions for the week containing `week_start`."""
        return await self.repo.get_predictions(user_id, get_week_start(week_start))


_task_service: Optional[TaskService] = None


def get_task_service() -> TaskService:
    """Get the task service singleton."""
    global _task_service
    if _task_service is None:
        _task_service = TaskService()
    return _task_service
