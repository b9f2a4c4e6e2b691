"""
HTTP API for meetings, challenges, JIRA tasks, capacity and settings.

The caller is identified by the X-User-Id header; authenticating that
header is left to the deployment in front of the app.
"""

import logging
from datetime import date, datetime
from typing import Optional, NoReturn

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from ..database.exceptions import EntityNotFoundError
from ..database.repositories.user_settings import get_user_settings_repository
from ..engine.gamification import describe_challenge
from ..integrations.exceptions import IntegrationNotConfiguredError
from ..models.api import (
    AnalyzeDocRequest,
    CapacityRequest,
    MeetingSyncRequest,
    PredictRequest,
    UserSettingsUpdate,
)
from ..models.user_settings import UserSettings
from ..services.challenges import get_challenge_service
from ..services.meetings import get_meeting_service
from ..services.tasks import get_task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


async def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Resolve the calling user from the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def _raise_http_error(e: Exception, action: str) -> NoReturn:
    if isinstance(e, HTTPException):
        raise e
    if isinstance(e, EntityNotFoundError):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, IntegrationNotConfiguredError):
        raise HTTPException(status_code=400, detail=str(e))
    logger.error(f"Failed to {action}: {e}")
    raise HTTPException(status_code=500, detail=str(e) or f"Failed to {action}")


def _meeting_with_score(meeting, score) -> dict:
    data = meeting.model_dump(mode="json")
    data["score"] = score.model_dump(mode="json") if score else None
    return data


# ============================================================================
# Meetings
# ============================================================================

@router.post("/meetings/sync")
async def sync_meetings(
    request: Optional[MeetingSyncRequest] = None,
    user_id: str = Depends(get_user_id),
):
    """Import meetings from Google Calendar."""
    request = request or MeetingSyncRequest()
    try:
        meetings = await get_meeting_service().sync_calendar(user_id, request.time_min, request.time_max)
        return {"success": True, "meetings": meetings, "count": len(meetings)}
    except Exception as e:
        _raise_http_error(e, "sync meetings")


@router.get("/meetings")
async def list_meetings(
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    user_id: str = Depends(get_user_id),
):
    """Meetings in range with their scores."""
    try:
        items = await get_meeting_service().list_meetings(user_id, start_date, end_date)
        return [_meeting_with_score(item["meeting"], item["score"]) for item in items]
    except Exception as e:
        _raise_http_error(e, "fetch meetings")


@router.post("/meetings/{meeting_id}/analyze-doc")
async def analyze_meeting_doc(
    meeting_id: str,
    request: AnalyzeDocRequest,
    user_id: str = Depends(get_user_id),
):
    """Link a notes document to a meeting and rescore it."""
    try:
        result = await get_meeting_service().analyze_document(user_id, meeting_id, request.google_doc_id)
        return {"success": True, "score": result["score"], "content": result["content"]}
    except Exception as e:
        _raise_http_error(e, "analyze document")


@router.get("/stats")
async def get_stats(
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    user_id: str = Depends(get_user_id),
):
    """Score statistics for the user's meetings."""
    try:
        return await get_meeting_service().get_stats(user_id, start_date, end_date)
    except Exception as e:
        _raise_http_error(e, "fetch statistics")


# ============================================================================
# Challenges
# ============================================================================

@router.get("/challenge/current")
async def current_challenge(user_id: str = Depends(get_user_id)):
    """This week's challenge, generated on first access."""
    try:
        return describe_challenge(await get_challenge_service().get_current(user_id))
    except Exception as e:
        _raise_http_error(e, "fetch challenge")


@router.post("/challenge/generate")
async def generate_challenge(user_id: str = Depends(get_user_id)):
    """(Re)generate this week's challenge."""
    try:
        return describe_challenge(await get_challenge_service().generate(user_id))
    except Exception as e:
        _raise_http_error(e, "generate challenge")


@router.get("/achievements")
async def list_achievements(user_id: str = Depends(get_user_id)):
    try:
        return await get_challenge_service().list_achievements(user_id)
    except Exception as e:
        _raise_http_error(e, "fetch achievements")


# ============================================================================
# JIRA, capacity and predictions
# ============================================================================

@router.post("/jira/sync")
async def sync_jira(user_id: str = Depends(get_user_id)):
    """Import the user's JIRA issues."""
    try:
        tasks = await get_task_service().sync_jira(user_id)
        return {"success": True, "count": len(tasks), "tasks": tasks}
    except Exception as e:
        _raise_http_error(e, "sync JIRA tasks")


@router.get("/jira/tasks")
async def list_jira_tasks(
    status: Optional[str] = None,
    user_id: str = Depends(get_user_id),
):
    try:
        return await get_task_service().get_tasks(user_id, status)
    except Exception as e:
        _raise_http_error(e, "fetch JIRA tasks")


@router.post("/capacity/calculate")
async def calculate_capacity(
    request: Optional[CapacityRequest] = None,
    user_id: str = Depends(get_user_id),
):
    """Calculate and store capacity for a day (default: today)."""
    request = request or CapacityRequest()
    try:
        return await get_task_service().calculate_capacity(user_id, request.day)
    except Exception as e:
        _raise_http_error(e, "calculate capacity")


@router.get("/capacity/week")
async def week_capacity(
    week_start: Optional[date] = Query(default=None, alias="weekStart"),
    user_id: str = Depends(get_user_id),
):
    try:
        return await get_task_service().get_week_capacity(user_id, week_start)
    except Exception as e:
        _raise_http_error(e, "fetch weekly capacity")


@router.post("/tasks/predict")
async def predict_tasks(
    request: Optional[PredictRequest] = None,
    user_id: str = Depends(get_user_id),
):
    """Predict completion of open tasks for a week."""
    request = request or PredictRequest()
    try:
        result = await get_task_service().predict_week(user_id, request.week_start)
        return {
            "week_start": result["week_start"],
            "summary": result["summary"],
            "predictions": [
                {
                    **item["prediction"].model_dump(mode="json"),
                    "task": item["task"].model_dump(mode="json") if item["task"] else None,
                }
                for item in result["predictions"]
            ],
        }
    except Exception as e:
        _raise_http_error(e, "predict task completion")


@router.get("/tasks/predictions")
async def list_predictions(
    week_start: Optional[date] = Query(default=None, alias="weekStart"),
    user_id: str = Depends(get_user_id),
):
    try:
        return await get_task_service().get_predictions(user_id, week_start)
    except Exception as e:
        _raise_http_error(e, "fetch predictions")


# ============================================================================
# Settings
# ============================================================================

@router.get("/settings")
async def get_settings(user_id: str = Depends(get_user_id)):
    """User settings without secrets. Unsaved users get the defaults."""
    try:
        user_settings = await get_user_settings_repository().get(user_id)
        return (user_settings or UserSettings(user_id=user_id)).to_public_dict()
    except Exception as e:
        _raise_http_error(e, "fetch settings")


@router.post("/settings")
async def update_settings(
    request: UserSettingsUpdate,
    user_id: str = Depends(get_user_id),
):
    """Partially update user settings."""
    try:
        user_settings = await get_user_settings_repository().upsert(
            user_id, request.model_dump(exclude_none=True)
        )
        return user_settings.to_public_dict()
    except Exception as e:
        _raise_http_error(e, "update settings")
