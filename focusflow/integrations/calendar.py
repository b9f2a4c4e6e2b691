"""
Google Calendar integration for meeting sync.

Reads the user's primary calendar with their OAuth access token. Events
are converted to Meeting records; events without an id, title or timed
start/end (all-day events, for example) are skipped.
"""

import asyncio
import logging
from typing import Dict, Any, Optional, List
from datetime import datetime

from google.oauth2.credentials import Credentials as OAuth2Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..models.meeting import Meeting
from ..engine.text_analysis import extract_google_doc_id
from ..utils.datetime_utils import to_aware_utc
from .exceptions import ExternalAPIError, IntegrationNotConfiguredError

logger = logging.getLogger(__name__)


def _parse_event_time(value: str) -> datetime:
    # Google returns RFC 3339, possibly with a trailing Z
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return to_aware_utc(datetime.fromisoformat(value))


def event_to_meeting(event: Dict[str, Any], user_id: str) -> Optional[Meeting]:
    """
    Convert a Calendar API event to a Meeting.

    Returns None for events missing an id, summary or timed start/end.
    """
    event_id = event.get("id")
    summary = event.get("summary")
    start = (event.get("start") or {}).get("dateTime")
    end = (event.get("end") or {}).get("dateTime")

    if not event_id or not summary or not start or not end:
        return None

    description = event.get("description")
    return Meeting(
        id=event_id,
        user_id=user_id,
        google_event_id=event_id,
        title=summary,
        description=description,
        start_time=_parse_event_time(start),
        end_time=_parse_event_time(end),
        participants=len(event.get("attendees") or []),
        google_doc_id=extract_google_doc_id(description),
    )


class GoogleCalendarClient:
    """Read-only client for a user's primary calendar."""

    SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]

    def __init__(self, access_token: Optional[str], calendar_id: str = "primary"):
        if not access_token:
            raise IntegrationNotConfiguredError("Google account not connected")
        self.calendar_id = calendar_id
        credentials = OAuth2Credentials(token=access_token, scopes=self.SCOPES)
        self.service = build("calendar", "v3", credentials=credentials, cache_discovery=False)

    async def list_events(self, time_min: datetime, time_max: datetime) -> List[Dict[str, Any]]:
        """
        List single (expanded) events in [time_min, time_max], ordered by start.

        Raises:
            ExternalAPIError: the Calendar API rejected the request
        """
        try:
            events_result = await asyncio.wait_for(
                asyncio.to_thread(self.service.events().list(
                    calendarId=self.calendar_id,
                    timeMin=to_aware_utc(time_min).isoformat(),
                    timeMax=to_aware_utc(time_max).isoformat(),
                    singleEvents=True,
                    orderBy="startTime",
                ).execute),
                timeout=30.0
            )
        except HttpError as e:
            logger.error(f"Google Calendar API error: {e}")
            raise ExternalAPIError(f"Google Calendar request failed: {e}", status_code=e.resp.status)
        except asyncio.TimeoutError:
            logger.error("Google Calendar request timed out")
            raise ExternalAPIError("Google Calendar request timed out")

        events = events_result.get("items", [])
        logger.info(f"Fetched {len(events)} calendar events")
        return events

    async def list_meetings(self, user_id: str, time_min: datetime, time_max: datetime) -> List[Meeting]:
        """List events as meetings, dropping the ones that cannot be scored."""
        meetings = []
        for event in await self.list_events(time_min, time_max):
            meeting = event_to_meeting(event, user_id)
            if meeting is None:
                logger.debug(f"Skipping calendar event {event.get('id')}: missing title or times")
                continue
            meetings.append(meeting)
        return meetings
