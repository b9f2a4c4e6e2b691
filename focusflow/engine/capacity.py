"""
Task effort estimation and daily capacity calculation.

Capacity is the time left in a working day for task work once meetings and
context-switching overhead are subtracted:

    available = max(0, work_day_hours - meeting_hours - tasks * 20min)
"""

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

import pytz

from ..models.meeting import Meeting
from ..models.task import CapacityCalculation, JiraTask, TaskPriority
from ..utils.datetime_utils import day_bounds, to_aware_utc

logger = logging.getLogger(__name__)


CONTEXT_SWITCHING_MINUTES = 20
STANDARD_WORK_DAY_HOURS = 8.0
MIN_TASK_HOURS = 1.0

STORY_POINT_TO_HOURS: Dict[float, float] = {
    1: 1.0,
    2: 2.0,
    3: 4.0,
    5: 8.0,
    8: 16.0,
    13: 24.0,
}

PRIORITY_DEFAULT_HOURS: Dict[TaskPriority, float] = {
    TaskPriority.HIGHEST: 4.0,
    TaskPriority.HIGH: 3.0,
    TaskPriority.MEDIUM: 2.0,
    TaskPriority.LOW: 1.0,
    TaskPriority.LOWEST: 0.5,
}

PRIORITY_RANK: Dict[TaskPriority, int] = {
    TaskPriority.HIGHEST: 1,
    TaskPriority.HIGH: 2,
    TaskPriority.MEDIUM: 3,
    TaskPriority.LOW: 4,
    TaskPriority.LOWEST: 5,
}


def normalize_priority(priority: Optional[str]) -> TaskPriority:
    """Map a JIRA priority name onto TaskPriority. Unset or unknown names become Medium."""
    try:
        return TaskPriority(priority)
    except ValueError:
        return TaskPriority.MEDIUM


def estimate_task_hours(task: JiraTask) -> float:
    """
    Estimate the hours a task needs. First match wins:

    1. explicit hour estimate
    2. story points via STORY_POINT_TO_HOURS, else points * 2
    3. priority default (unset or unknown priority counts as Medium)

    Always returns a positive number.
    """
    if task.estimate_hours is not None:
        return task.estimate_hours if task.estimate_hours > 0 else MIN_TASK_HOURS

    if task.story_points is not None:
        hours = STORY_POINT_TO_HOURS.get(task.story_points, task.story_points * 2)
        return hours if hours > 0 else MIN_TASK_HOURS

    return PRIORITY_DEFAULT_HOURS[normalize_priority(task.priority)]


def priority_rank(priority: Optional[str]) -> int:
    """Rank a priority name, 1 = Highest. Unknown names rank as Medium."""
    return PRIORITY_RANK[normalize_priority(priority)]


def _allocation_key(task: JiraTask) -> Tuple[int, bool, date]:
    return (
        priority_rank(task.priority),
        task.due_date is None,
        task.due_date or date.max,
    )


def sort_tasks_for_allocation(tasks: Iterable[JiraTask]) -> List[JiraTask]:
    """
    Order tasks for greedy allocation.

    Highest priority first, then earliest due date; tasks with no due date
    go last among equal priority. Equal keys keep their input order.
    """
    return sorted(tasks, key=_allocation_key)


def meetings_on_day(
    day: date,
    meetings: Iterable[Meeting],
    tz: Optional[pytz.BaseTzInfo] = None,
) -> List[Meeting]:
    """Meetings whose start falls inside the local calendar day (inclusive)."""
    day_start, day_end = day_bounds(day, tz)
    return [
        m for m in meetings
        if day_start <= to_aware_utc(m.start_time) <= day_end
    ]


def count_completable_tasks(tasks: Iterable[JiraTask], available_hours: float) -> int:
    """Greedy count of tasks that fit into `available_hours` in allocation order."""
    remaining = available_hours
    count = 0
    for task in sort_tasks_for_allocation(tasks):
        task_hours = estimate_task_hours(task)
        if remaining >= task_hours:
            count += 1
            remaining -= task_hours
    return count


def calculate_daily_capacity(
    day: date,
    meetings: Iterable[Meeting],
    tasks: Iterable[JiraTask],
    work_day_hours: float = STANDARD_WORK_DAY_HOURS,
    context_switching_minutes: int = CONTEXT_SWITCHING_MINUTES,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> CapacityCalculation:
    """
    Compute the hours available for task work on `day`.

    Args:
        day: Target calendar date (a datetime is truncated to its date)
        meetings: Candidate meetings; only those starting on `day` count
        tasks: Open tasks; each one costs `context_switching_minutes`
        work_day_hours: Length of the standard working day
        context_switching_minutes: Overhead per open task
        tz: Timezone for day boundaries (defaults to the configured one)

    Returns:
        CapacityCalculation with available_hours floored at 0
    """
    if isinstance(day, datetime):
        day = day.date()

    task_list = list(tasks)
    day_meetings = meetings_on_day(day, meetings, tz)

    meeting_hours = sum(m.duration_hours for m in day_meetings)

    switching_minutes = len(task_list) * context_switching_minutes
    switching_hours = switching_minutes / 60

    available_hours = max(0.0, work_day_hours - meeting_hours - switching_hours)

    completable = count_completable_tasks(task_list, available_hours)

    logger.debug(
        f"Capacity for {day}: {len(day_meetings)} meetings ({meeting_hours:.2f}h), "
        f"{len(task_list)} tasks ({switching_minutes}m switching), "
        f"{available_hours:.2f}h available"
    )

    return CapacityCalculation(
        total_hours=work_day_hours,
        meeting_hours=meeting_hours,
        context_switching_minutes=switching_minutes,
        available_hours=available_hours,
        tasks_count=len(task_list),
        completable_tasks_count=completable,
    )
