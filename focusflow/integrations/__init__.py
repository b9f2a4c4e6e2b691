"""
External data sources: Google Calendar, Google Docs and JIRA.
"""

from .calendar import GoogleCalendarClient, event_to_meeting
from .google_docs import GoogleDocsClient
from .jira import JiraClient, issue_to_task
from .exceptions import (
    IntegrationError,
    IntegrationNotConfiguredError,
    ExternalAPIError,
)

__all__ = [
    "GoogleCalendarClient",
    "event_to_meeting",
    "GoogleDocsClient",
    "JiraClient",
    "issue_to_task",
    "IntegrationError",
    "IntegrationNotConfiguredError",
    "ExternalAPIError",
]
