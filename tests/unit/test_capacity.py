"""
Tests for the daily capacity calculator.
"""

import pytest
from datetime import date, datetime

import pytz

from focusflow.engine.capacity import (
    calculate_daily_capacity,
    count_completable_tasks,
    meetings_on_day,
)

DAY = date(2026, 3, 2)


class TestMeetingsOnDay:
    """Tests for meetings_on_day."""

    def test_includes_meetings_starting_that_day(self, make_meeting):
        """Test that only meetings starting on the day are kept."""
        today = make_meeting(start=datetime(2026, 3, 2, 9, 0))
        tomorrow = make_meeting(start=datetime(2026, 3, 3, 9, 0))

        result = meetings_on_day(DAY, [today, tomorrow], pytz.UTC)

        assert result == [today]

    def test_boundaries_are_inclusive(self, make_meeting):
        """Test meetings at midnight and at the last microsecond."""
        midnight = make_meeting(start=datetime(2026, 3, 2, 0, 0))
        last = make_meeting(start=datetime(2026, 3, 2, 23, 59, 59, 999999))

        result = meetings_on_day(DAY, [midnight, last], pytz.UTC)

        assert len(result) == 2

    def test_uses_local_timezone(self, make_meeting):
        """Test that day bounds follow the given timezone."""
        tz = pytz.timezone("America/New_York")
        # 03:00 UTC on Mar 3 is 22:00 on Mar 2 in New York
        late_evening = make_meeting(start=datetime(2026, 3, 3, 3, 0))

        assert meetings_on_day(DAY, [late_evening], tz) == [late_evening]
        assert meetings_on_day(DAY, [late_evening], pytz.UTC) == []


class TestCalculateDailyCapacity:
    """Tests for calculate_daily_capacity."""

    def test_empty_day_is_full_capacity(self):
        """Test a day with no meetings or tasks."""
        result = calculate_daily_capacity(DAY, [], [], tz=pytz.UTC)

        assert result.total_hours == 8.0
        assert result.meeting_hours == 0
        assert result.context_switching_minutes == 0
        assert result.available_hours == 8.0
        assert result.tasks_count == 0
        assert result.completable_tasks_count == 0

    def test_subtracts_meetings_and_switching(self, make_meeting, make_task):
        """Test 8h - 2h of meetings - 3 tasks * 20min = 5h."""
        meetings = [
            make_meeting(start=datetime(2026, 3, 2, 9, 0), minutes=60),
            make_meeting(start=datetime(2026, 3, 2, 14, 0), minutes=60),
        ]
        tasks = [make_task(estimate_hours=2), make_task(estimate_hours=2), make_task(estimate_hours=2)]

        result = calculate_daily_capacity(DAY, meetings, tasks, tz=pytz.UTC)

        assert result.meeting_hours == pytest.approx(2.0)
        assert result.context_switching_minutes == 60
        assert result.available_hours == pytest.approx(5.0)
        assert result.tasks_count == 3
        assert result.completable_tasks_count == 2

    def test_ignores_meetings_on_other_days(self, make_meeting):
        """Test that other days' meetings do not reduce capacity."""
        other_day = make_meeting(start=datetime(2026, 3, 3, 9, 0), minutes=240)

        result = calculate_daily_capacity(DAY, [other_day], [], tz=pytz.UTC)

        assert result.available_hours == 8.0

    def test_available_hours_floor_at_zero(self, make_meeting, make_task):
        """Test that overbooked days report zero, never negative."""
        meetings = [make_meeting(start=datetime(2026, 3, 2, 8, 0), minutes=600)]

        result = calculate_daily_capacity(DAY, meetings, [make_task()], tz=pytz.UTC)

        assert result.available_hours == 0
        assert result.completable_tasks_count == 0

    def test_custom_work_day_and_switching(self, make_task):
        """Test user-specific hours and switching overhead."""
        tasks = [make_task(), make_task()]

        result = calculate_daily_capacity(
            DAY, [], tasks, work_day_hours=6, context_switching_minutes=30, tz=pytz.UTC
        )

        assert result.total_hours == 6
        assert result.context_switching_minutes == 60
        assert result.available_hours == pytest.approx(5.0)

    def test_datetime_is_truncated_to_date(self, make_meeting):
        """Test that a datetime target behaves like its date."""
        meeting = make_meeting(start=datetime(2026, 3, 2, 9, 0), minutes=60)

        by_date = calculate_daily_capacity(DAY, [meeting], [], tz=pytz.UTC)
        by_datetime = calculate_daily_capacity(datetime(2026, 3, 2, 17, 30), [meeting], [], tz=pytz.UTC)

        assert by_date == by_datetime

    def test_more_tasks_never_increase_capacity(self, make_task):
        """Test monotonicity in the number of open tasks."""
        tasks = [make_task() for _ in range(10)]
        previous = None
        for n in range(len(tasks) + 1):
            available = calculate_daily_capacity(DAY, [], tasks[:n], tz=pytz.UTC).available_hours
            if previous is not None:
                assert available <= previous
            previous = available


class TestCountCompletableTasks:
    """Tests for count_completable_tasks."""

    def test_greedy_in_priority_order(self, make_task):
        """Test that a big high-priority task can crowd out small ones."""
        tasks = [
            make_task(priority="Low", estimate_hours=1),
            make_task(priority="Highest", estimate_hours=4),
            make_task(priority="Low", estimate_hours=1),
        ]
        assert count_completable_tasks(tasks, 4.5) == 1

    def test_skips_tasks_that_do_not_fit(self, make_task):
        """Test that a task too large is skipped, not a stopping point."""
        tasks = [
            make_task(priority="Highest", estimate_hours=10),
            make_task(priority="Low", estimate_hours=2),
        ]
        assert count_completable_tasks(tasks, 3) == 1

    def test_never_exceeds_task_count(self, make_task):
        """Test bounds of the count."""
        tasks = [make_task(estimate_hours=0.5) for _ in range(3)]
        assert count_completable_tasks(tasks, 100) == 3
        assert count_completable_tasks([], 100) == 0
