"""Per-user settings model."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class UserSettings(BaseModel):
    """Capacity preferences and integration credentials for a user."""

    id: Optional[str] = None
    user_id: str
    daily_work_hours: float = 8.0
    context_switching_minutes: int = 20
    jira_email: Optional[str] = None
    jira_api_token: Optional[str] = None
    jira_host: Optional[str] = None
    jira_jql_query: Optional[str] = None
    google_access_token: Optional[str] = None
    google_refresh_token: Optional[str] = None
    google_token_expiry: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    def to_public_dict(self) -> dict:
        """Serialize without secrets."""
        return {
            "id": self.id or "",
            "user_id": self.user_id,
            "daily_work_hours": self.daily_work_hours,
            "context_switching_minutes": self.context_switching_minutes,
            "jira_email": self.jira_email,
            "jira_host": self.jira_host,
            "jira_jql_query": self.jira_jql_query,
            "has_jira_credentials": bool(self.jira_api_token),
            "has_google_credentials": bool(self.google_access_token),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
