"""
Unit tests for the JIRA integration.

Tests:
- Issue to task mapping
- JQL search over httpx
- Credential fallback and error handling
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import date

import httpx

from focusflow.integrations.jira import JiraClient, issue_to_task, SEARCH_FIELDS
from focusflow.integrations.exceptions import ExternalAPIError, IntegrationNotConfiguredError
from focusflow.models.user_settings import UserSettings

ISSUE = {
    "id": "10042",
    "key": "PROJ-42",
    "fields": {
        "summary": "Build export endpoint",
        "status": {"name": "In Progress"},
        "priority": {"name": "High"},
        "assignee": {"displayName": "Dana Lee"},
        "project": {"key": "PROJ"},
        "timeestimate": 14400,
        "duedate": "2026-03-05",
        "labels": ["backend"],
    },
}


@pytest.fixture
def jira():
    return JiraClient("https://example.atlassian.net/", "dev@example.com", "token-123")


def _mock_http(response=None, error=None):
    mock_client = MagicMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    if error is not None:
        mock_client.post = AsyncMock(side_effect=error)
    else:
        mock_client.post = AsyncMock(return_value=response)
    return mock_client


class TestIssueToTask:
    """Test JIRA issue mapping."""

    def test_maps_fields(self):
        task = issue_to_task(ISSUE, "user-1")

        assert task.jira_key == "PROJ-42"
        assert task.jira_id == "10042"
        assert task.status == "In Progress"
        assert task.priority == "High"
        assert task.estimate_hours == 4.0
        assert task.due_date == date(2026, 3, 5)
        assert task.assignee == "Dana Lee"
        assert task.project_key == "PROJ"
        assert task.labels == ["backend"]

    def test_sparse_issue_defaults(self):
        task = issue_to_task({"id": 7, "key": "PROJ-7", "fields": {"priority": None}}, "user-1")

        assert task.status == "To Do"
        assert task.priority == "Medium"
        assert task.assignee == "Unassigned"
        assert task.estimate_hours is None
        assert task.due_date is None
        assert task.labels == []

    def test_bad_due_date_ignored(self):
        issue = {"key": "PROJ-8", "fields": {"duedate": "next week"}}

        assert issue_to_task(issue, "user-1").due_date is None


class TestJiraClient:
    """Test JIRA search."""

    def test_missing_credentials(self):
        with pytest.raises(IntegrationNotConfiguredError):
            JiraClient("https://example.atlassian.net", "", "token-123")

    def test_from_user_settings(self):
        client = JiraClient.from_user_settings(UserSettings(
            user_id="user-1",
            jira_host="https://team.atlassian.net",
            jira_email="dev@example.com",
            jira_api_token="token-123",
        ))

        assert client.host == "https://team.atlassian.net"

    def test_from_empty_settings_without_globals(self):
        with pytest.raises(IntegrationNotConfiguredError):
            JiraClient.from_user_settings(None)

    @pytest.mark.asyncio
    async def test_search_issues(self, jira):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"issues": [ISSUE]}

        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client = _mock_http(mock_response)
            mock_client_class.return_value = mock_client

            issues = await jira.search_issues("project = PROJ")

        assert issues == [ISSUE]
        url = mock_client.post.call_args.args[0]
        payload = mock_client.post.call_args.kwargs["json"]
        assert url == "https://example.atlassian.net/rest/api/3/search/jql"
        assert payload == {"jql": "project = PROJ", "maxResults": 50, "fields": SEARCH_FIELDS}

    @pytest.mark.asyncio
    async def test_search_accepts_values_key(self, jira):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"values": [ISSUE]}

        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client_class.return_value = _mock_http(mock_response)

            tasks = await jira.fetch_tasks("user-1", "project = PROJ")

        assert [t.jira_key for t in tasks] == ["PROJ-42"]
        assert tasks[0].user_id == "user-1"

    @pytest.mark.asyncio
    async def test_search_api_error(self, jira):
        mock_response = MagicMock()
        mock_response.status_code = 401
        mock_response.text = "Unauthorized"

        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client_class.return_value = _mock_http(mock_response)

            with pytest.raises(ExternalAPIError) as exc_info:
                await jira.search_issues("project = PROJ")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_search_network_error(self, jira):
        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client_class.return_value = _mock_http(error=httpx.ConnectError("Connection failed"))

            with pytest.raises(ExternalAPIError):
                await jira.search_issues("project = PROJ")
