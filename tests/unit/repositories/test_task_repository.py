"""
Unit tests for TaskRepository.

Tests keyed upserts of tasks, capacities and predictions.
"""

import pytest
from unittest.mock import Mock
from datetime import date

from sqlalchemy.exc import OperationalError

from focusflow.database.repositories.tasks import TaskRepository
from focusflow.database.models import JiraTaskDB, DailyCapacityDB, TaskPredictionDB
from focusflow.database.exceptions import DatabaseOperationError
from focusflow.models.task import (
    CapacityCalculation,
    RiskLevel,
    TaskCompletionPrediction,
)


@pytest.fixture
def task_repository(mock_database):
    """Create TaskRepository with mocked database."""
    db, session = mock_database
    repo = TaskRepository()
    repo.db = db
    return repo, session


def _returns(session, row):
    result = Mock()
    result.scalar_one_or_none.return_value = row
    session.execute.return_value = result


@pytest.fixture
def calculation():
    return CapacityCalculation(
        total_hours=8,
        meeting_hours=2,
        context_switching_minutes=40,
        available_hours=5.33,
        tasks_count=2,
        completable_tasks_count=2,
    )


class TestTasks:
    """Tests for task upserts and queries."""

    @pytest.mark.asyncio
    async def test_new_task_inserted(self, task_repository, make_task):
        repo, session = task_repository
        _returns(session, None)
        task = make_task(jira_key="PROJ-7", labels=["backend"])

        result = await repo.upsert_task(task)

        row = session.add.call_args[0][0]
        assert isinstance(row, JiraTaskDB)
        assert row.jira_key == "PROJ-7"
        assert row.labels == ["backend"]
        assert result.jira_key == "PROJ-7"

    @pytest.mark.asyncio
    async def test_existing_task_updated(self, task_repository, make_task):
        """Test that the same (user, key) updates instead of duplicating."""
        repo, session = task_repository
        existing = JiraTaskDB(
            id="t-1", user_id="user-1", jira_key="PROJ-7", jira_id="1007",
            summary="Old", status="To Do", project_key="PROJ", labels=None,
        )
        _returns(session, existing)

        result = await repo.upsert_task(make_task(jira_key="PROJ-7", summary="New", status="In Progress"))

        session.add.assert_not_called()
        assert existing.summary == "New"
        assert existing.status == "In Progress"
        assert result.id == "t-1"

    @pytest.mark.asyncio
    async def test_get_tasks_handles_null_labels(self, task_repository):
        repo, session = task_repository
        rows = [JiraTaskDB(id="t-1", user_id="user-1", jira_key="PROJ-1", jira_id="1",
                           summary="", status="Done", project_key="", labels=None)]
        result = Mock()
        result.scalars.return_value.all.return_value = rows
        session.execute.return_value = result

        tasks = await repo.get_tasks("user-1", status="Done")

        assert tasks[0].labels == []
        assert tasks[0].is_active is False

    @pytest.mark.asyncio
    async def test_get_tasks_failure_raises(self, task_repository):
        repo, session = task_repository
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection reset"))

        with pytest.raises(DatabaseOperationError):
            await repo.get_tasks("user-1")


class TestCapacities:
    """Tests for capacity upserts."""

    @pytest.mark.asyncio
    async def test_new_capacity(self, task_repository, calculation):
        repo, session = task_repository
        _returns(session, None)

        result = await repo.upsert_capacity("user-1", date(2026, 3, 2), calculation)

        row = session.add.call_args[0][0]
        assert isinstance(row, DailyCapacityDB)
        assert row.date == date(2026, 3, 2)
        assert result.available_hours == 5.33

    @pytest.mark.asyncio
    async def test_recalculation_replaces(self, task_repository, calculation):
        """Test that one (user, date) keeps a single row."""
        repo, session = task_repository
        existing = DailyCapacityDB(
            id="c-1", user_id="user-1", date=date(2026, 3, 2), total_hours=8,
            meeting_hours=0, context_switching_minutes=0, available_hours=8,
            tasks_count=0, completable_tasks_count=0,
        )
        _returns(session, existing)

        result = await repo.upsert_capacity("user-1", date(2026, 3, 2), calculation)

        session.add.assert_not_called()
        assert existing.available_hours == 5.33
        assert result.id == "c-1"


class TestPredictions:
    """Tests for prediction persistence."""

    @pytest.mark.asyncio
    async def test_upsert_prediction(self, task_repository):
        repo, session = task_repository
        _returns(session, None)
        prediction = TaskCompletionPrediction(
            task_id="t-1",
            user_id="user-1",
            week_start_date=date(2026, 3, 2),
            completion_probability=60,
            risk_level=RiskLevel.MEDIUM,
            blockers=["Limited time buffer"],
        )

        result = await repo.upsert_prediction(prediction)

        row = session.add.call_args[0][0]
        assert isinstance(row, TaskPredictionDB)
        assert row.risk_level == "medium"
        assert result.risk_level == RiskLevel.MEDIUM
        assert result.blockers == ["Limited time buffer"]

    @pytest.mark.asyncio
    async def test_delete_week(self, task_repository):
        repo, session = task_repository
        result = Mock()
        result.rowcount = 3
        session.execute.return_value = result

        deleted = await repo.delete_predictions_for_week("user-1", date(2026, 3, 2))

        assert deleted == 3
        session.execute.assert_called_once()
