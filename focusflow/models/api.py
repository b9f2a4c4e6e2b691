"""
Request body models for the HTTP API.

FastAPI validates these automatically and answers 422 on bad input.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class MeetingSyncRequest(BaseModel):
    """Calendar window to sync. Defaults to now .. now + 7 days."""
    time_min: Optional[datetime] = Field(default=None, alias="timeMin")
    time_max: Optional[datetime] = Field(default=None, alias="timeMax")

    model_config = {"populate_by_name": True}


class AnalyzeDocRequest(BaseModel):
    """Google Doc to link to a meeting."""
    google_doc_id: str = Field(..., min_length=1, alias="googleDocId")

    model_config = {"populate_by_name": True}

    @field_validator("google_doc_id")
    @classmethod
    def strip_doc_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("googleDocId cannot be blank")
        return v


class CapacityRequest(BaseModel):
    """Day to calculate capacity for. Defaults to today."""
    day: Optional[date] = Field(default=None, alias="date")

    model_config = {"populate_by_name": True}


class PredictRequest(BaseModel):
    """Week to predict. Any date inside the week is accepted."""
    week_start: Optional[date] = Field(default=None, alias="weekStart")

    model_config = {"populate_by_name": True}


class UserSettingsUpdate(BaseModel):
    """Partial update of user settings."""
    daily_work_hours: Optional[float] = Field(default=None, gt=0, le=24, alias="dailyWorkHours")
    context_switching_minutes: Optional[int] = Field(default=None, ge=0, le=240, alias="contextSwitchingMinutes")
    jira_email: Optional[str] = Field(default=None, alias="jiraEmail")
    jira_api_token: Optional[str] = Field(default=None, alias="jiraApiToken")
    jira_host: Optional[str] = Field(default=None, alias="jiraHost")
    jira_jql_query: Optional[str] = Field(default=None, alias="jiraJqlQuery")

    model_config = {"populate_by_name": True}

    @field_validator("jira_host")
    @classmethod
    def validate_host(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().rstrip("/")
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("jiraHost must start with http:// or https://")
        return v or None
