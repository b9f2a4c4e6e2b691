"""
Weekly task completion predictor.

Allocates the week's available hours greedily across tasks in priority
order. The weekly pool is shared: a task processed later only sees what
earlier tasks left behind, so the allocation order must stay stable for
results to be reproducible.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

from ..models.task import (
    DailyCapacity,
    JiraTask,
    PredictionSummary,
    RiskLevel,
    TaskCompletionPrediction,
    WeeklyPrediction,
)
from ..utils.datetime_utils import days_until
from .capacity import estimate_task_hours, sort_tasks_for_allocation

logger = logging.getLogger(__name__)


BLOCKER_LIMITED_BUFFER = "Limited time buffer"
BLOCKER_INSUFFICIENT_TIME = "Insufficient time available"
BLOCKER_OVERCOMMITTED = "Overcommitted week"
BLOCKER_APPROACHING_DEADLINE = "Approaching deadline"

OVERCOMMIT_FACTOR = 1.5
DEADLINE_WINDOW_DAYS = 2
DEADLINE_SAFE_PROBABILITY = 80

LIKELY_THRESHOLD = 70
AT_RISK_THRESHOLD = 40

# Absorbs float drift when draining the per-day ledger
_EPSILON = 1e-9


@dataclass
class _DayLedger:
    """Remaining hours on one day of the week. Local to one prediction run."""
    day: date
    remaining_hours: float


def _build_ledger(daily_capacities: Iterable[DailyCapacity]) -> List[_DayLedger]:
    entries = [_DayLedger(dc.date, dc.available_hours) for dc in daily_capacities]
    entries.sort(key=lambda e: e.day)
    return entries


def _consume_ledger(ledger: List[_DayLedger], hours: float) -> Optional[date]:
    """
    Drain `hours` from the ledger day by day.

    Returns the day the requirement is fully met, or None if the ledger
    runs dry first.
    """
    hours_needed = hours
    for entry in ledger:
        if entry.remaining_hours <= 0:
            continue
        used = min(hours_needed, entry.remaining_hours)
        entry.remaining_hours -= used
        hours_needed -= used
        if hours_needed <= _EPSILON:
            return entry.day
    return None


def _summarize(predictions: Sequence[TaskCompletionPrediction], total_tasks: int) -> PredictionSummary:
    probabilities = [p.completion_probability for p in predictions]
    return PredictionSummary(
        total_tasks=total_tasks,
        likely_complete=sum(1 for p in probabilities if p >= LIKELY_THRESHOLD),
        at_risk=sum(1 for p in probabilities if AT_RISK_THRESHOLD <= p < LIKELY_THRESHOLD),
        unlikely=sum(1 for p in probabilities if p < AT_RISK_THRESHOLD),
    )


def predict_weekly_completion(
    week_start: date,
    tasks: Iterable[JiraTask],
    daily_capacities: Iterable[DailyCapacity],
) -> WeeklyPrediction:
    """
    Predict which tasks can be completed within the week.

    Args:
        week_start: Monday of the target week
        tasks: Open tasks
        daily_capacities: Capacity records for the week (fewer than 7 is fine)

    Returns:
        WeeklyPrediction with one prediction per task, in allocation order
    """
    task_list = list(tasks)
    capacities = list(daily_capacities)

    total_weekly_hours = sum(dc.available_hours for dc in capacities)
    total_estimated_hours = sum(estimate_task_hours(t) for t in task_list)
    overcommitted = total_estimated_hours > total_weekly_hours * OVERCOMMIT_FACTOR

    ledger = _build_ledger(capacities)
    remaining_weekly_hours = total_weekly_hours
    predictions: List[TaskCompletionPrediction] = []

    for task in sort_tasks_for_allocation(task_list):
        task_hours = estimate_task_hours(task)
        blockers: List[str] = []
        estimated_completion: Optional[date] = None

        if remaining_weekly_hours >= task_hours:
            ratio = remaining_weekly_hours / task_hours
            if ratio >= 2:
                probability, risk = 95, RiskLevel.LOW
            elif ratio >= 1.2:
                probability, risk = 75, RiskLevel.MEDIUM
            else:
                probability, risk = 60, RiskLevel.MEDIUM
                blockers.append(BLOCKER_LIMITED_BUFFER)

            remaining_weekly_hours -= task_hours
            estimated_completion = _consume_ledger(ledger, task_hours)
        else:
            # Not scheduled, so the pool is left untouched
            probability = max(0, math.floor(remaining_weekly_hours / task_hours * 100))
            risk = RiskLevel.HIGH
            blockers.append(BLOCKER_INSUFFICIENT_TIME)
            if overcommitted:
                blockers.append(BLOCKER_OVERCOMMITTED)

        if task.due_date is not None:
            if (days_until(week_start, task.due_date) <= DEADLINE_WINDOW_DAYS
                    and probability < DEADLINE_SAFE_PROBABILITY):
                blockers.append(BLOCKER_APPROACHING_DEADLINE)
                risk = RiskLevel.HIGH

        predictions.append(TaskCompletionPrediction(
            task_id=task.id or task.jira_key,
            user_id=task.user_id,
            week_start_date=week_start,
            completion_probability=probability,
            risk_level=risk,
            estimated_completion_date=estimated_completion,
            blockers=blockers,
        ))

    summary = _summarize(predictions, len(task_list))

    logger.debug(
        f"Predicted week {week_start}: {len(task_list)} tasks, "
        f"{total_estimated_hours:.1f}h needed vs {total_weekly_hours:.1f}h available "
        f"({summary.likely_complete} likely, {summary.at_risk} at risk, {summary.unlikely} unlikely)"
    )

    return WeeklyPrediction(predictions=predictions, summary=summary)
