"""
Pytest configuration and shared fixtures.
"""

import os

# Must be set before config.settings is first imported
os.environ["ENVIRONMENT"] = "test"
os.environ["TIMEZONE"] = "UTC"

import pytest
from datetime import date, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytz

from focusflow.models.meeting import Meeting, MeetingScoreResult
from focusflow.models.task import JiraTask, DailyCapacity

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)

# A Monday
WEEK_START = date(2026, 3, 2)


@pytest.fixture
def week_start():
    return WEEK_START


@pytest.fixture
def make_task():
    """Factory for JiraTask records."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "id": f"task-{counter['n']}",
            "user_id": "user-1",
            "jira_key": f"PROJ-{counter['n']}",
            "summary": f"Task {counter['n']}",
            "status": "To Do",
            "priority": "Medium",
        }
        data.update(overrides)
        return JiraTask(**data)

    return _make


@pytest.fixture
def make_meeting():
    """Factory for Meeting records. start is a naive UTC datetime."""
    counter = {"n": 0}

    def _make(start=datetime(2026, 3, 2, 10, 0), minutes=30, **overrides):
        counter["n"] += 1
        start = pytz.UTC.localize(start) if start.tzinfo is None else start
        data = {
            "id": f"evt-{counter['n']}",
            "user_id": "user-1",
            "google_event_id": f"evt-{counter['n']}",
            "title": "Project review",
            "start_time": start,
            "end_time": start + timedelta(minutes=minutes),
            "participants": 4,
        }
        data.update(overrides)
        return Meeting(**data)

    return _make


@pytest.fixture
def make_capacity():
    """Factory for DailyCapacity records."""

    def _make(day, available_hours, **overrides):
        data = {"user_id": "user-1", "date": day, "available_hours": available_hours}
        data.update(overrides)
        return DailyCapacity(**data)

    return _make


@pytest.fixture
def make_score():
    """Factory for MeetingScoreResult with every criterion at `default`."""

    def _make(default=20, **overrides):
        data = {
            "agenda_score": default,
            "participants_score": default,
            "timing_score": default,
            "actions_score": default,
            "attention_score": default,
        }
        data.update(overrides)
        data["total_score"] = sum(data.values())
        return MeetingScoreResult(**data)

    return _make


@pytest.fixture
def mock_database():
    """Mock database with session context manager."""
    db = Mock()
    session = AsyncMock()

    # Mock session context manager
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)

    # Mock session methods
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.add = Mock()

    db.session = Mock(return_value=session)

    return db, session
