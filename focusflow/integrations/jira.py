"""
JIRA Cloud integration.

Searches issues through the REST v3 JQL endpoint with Basic auth (account
email plus API token). Build a new client for every sync so credential
changes take effect immediately.
"""

import logging
from datetime import date
from typing import Dict, Any, Optional, List

import httpx

from config import settings
from ..models.task import JiraTask, TaskPriority
from ..models.user_settings import UserSettings
from .exceptions import ExternalAPIError, IntegrationNotConfiguredError

logger = logging.getLogger(__name__)


SEARCH_FIELDS = [
    "summary",
    "status",
    "priority",
    "assignee",
    "project",
    "timeestimate",
    "duedate",
    "labels",
]


def _parse_due_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        logger.warning(f"Ignoring unparseable JIRA due date: {value}")
        return None


def issue_to_task(issue: Dict[str, Any], user_id: str) -> JiraTask:
    """Map a JIRA search result to a JiraTask. timeestimate is in seconds."""
    fields = issue.get("fields") or {}
    time_estimate = fields.get("timeestimate")

    return JiraTask(
        user_id=user_id,
        jira_key=issue.get("key") or "",
        jira_id=str(issue.get("id") or ""),
        summary=fields.get("summary") or "",
        status=(fields.get("status") or {}).get("name") or "To Do",
        priority=(fields.get("priority") or {}).get("name") or TaskPriority.MEDIUM.value,
        estimate_hours=time_estimate / 3600 if time_estimate else None,
        due_date=_parse_due_date(fields.get("duedate")),
        assignee=(fields.get("assignee") or {}).get("displayName") or "Unassigned",
        project_key=(fields.get("project") or {}).get("key") or "",
        labels=fields.get("labels") or [],
    )


class JiraClient:
    """Minimal async JIRA search client."""

    def __init__(
        self,
        host: str,
        email: str,
        api_token: str,
        max_results: int = 50,
        timeout: float = 30.0,
    ):
        if not host or not email or not api_token:
            raise IntegrationNotConfiguredError(
                "JIRA credentials not configured. Set host, email and API token in settings."
            )
        self.host = host.rstrip("/")
        self.auth = httpx.BasicAuth(email, api_token)
        self.max_results = max_results
        self.timeout = timeout

    @classmethod
    def from_user_settings(cls, user_settings: Optional[UserSettings]) -> "JiraClient":
        """Build a client from per-user credentials, falling back to the global ones."""
        user_settings = user_settings or UserSettings(user_id="")
        return cls(
            host=user_settings.jira_host or settings.jira_host,
            email=user_settings.jira_email or settings.jira_email,
            api_token=user_settings.jira_api_token or settings.jira_api_token,
            max_results=settings.jira_max_results,
        )

    async def search_issues(self, jql: str) -> List[Dict[str, Any]]:
        """
        Run a JQL search.

        Raises:
            ExternalAPIError: non-2xx answer or transport failure
        """
        url = f"{self.host}/rest/api/3/search/jql"
        payload = {
            "jql": jql,
            "maxResults": self.max_results,
            "fields": SEARCH_FIELDS,
        }
        logger.info(f"Searching JIRA at {self.host} with JQL: {jql}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, auth=self.auth) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error(f"JIRA request failed: {e}")
            raise ExternalAPIError(f"JIRA request failed: {e}")

        if response.status_code != 200:
            logger.error(f"JIRA API error: {response.status_code} - {response.text}")
            raise ExternalAPIError(
                f"JIRA API returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        data = response.json()
        # The JQL endpoint has answered with both shapes
        issues = data.get("issues") or data.get("values") or []
        logger.info(f"Found {len(issues)} JIRA issues")
        return issues

    async def fetch_tasks(self, user_id: str, jql: str) -> List[JiraTask]:
        """Search and convert results to tasks."""
        return [issue_to_task(issue, user_id) for issue in await self.search_issues(jql)]
