"""
FocusFlow: meeting quality scoring, weekly challenges and task capacity
planning on top of Google Calendar, Google Docs and JIRA.
"""

__version__ = "1.0.0"
