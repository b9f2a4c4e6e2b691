"""
Text heuristics feeding the meeting score calculator.

Classifies calendar descriptions and meeting notes by keyword and pattern
presence. Every helper is deterministic: the same text always yields the
same result.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional


AGENDA_KEYWORDS = ("agenda", "topics", "discussion points", "objectives", "goals")

GENERIC_TITLE_KEYWORDS = (
    "meeting", "sync", "catch up", "check in", "update", "weekly", "daily", "standup",
)
GENERIC_TITLE_MAX_LENGTH = 30

ACTION_KEYWORDS = ("action", "todo", "task", "follow up", "next steps", "assigned to")
ATTENTION_KEYWORDS = ("important", "note", "attention", "critical", "key point", "decision", "blocker")
ACCOUNTABILITY_KEYWORDS = ("assigned to", "owner", "responsible", "dri", "who will")
DEADLINE_KEYWORDS = (
    "deadline", "due", "eod", "eow", "end of day", "end of week", "by tomorrow", "by monday",
    "by tuesday", "by wednesday", "by thursday", "by friday",
)

_MONTHS = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"

DATE_PATTERNS = (
    re.compile(r"\b\d{4}-\d{1,2}-\d{1,2}\b"),                  # 2026-03-05
    re.compile(r"\b\d{1,2}/\d{1,2}(?:/\d{2,4})?\b"),           # 3/5, 03/05/2026
    re.compile(r"\b\d{1,2}\.\d{1,2}\.\d{2,4}\b"),              # 05.03.2026
    re.compile(rf"\b{_MONTHS}\s+\d{{1,2}}(?:st|nd|rd|th)?\b"),  # Mar 5, March 5th
    re.compile(rf"\b\d{{1,2}}(?:st|nd|rd|th)?\s+{_MONTHS}"),    # 5 March
)

_BULLET_LINE = re.compile(r"^\s*[-•*]\s+")
_NUMBERED_LINE = re.compile(r"^\s*\d+[.)]\s+")
_GOOGLE_DOC_URL = re.compile(r"docs\.google\.com/document/d/([a-zA-Z0-9_-]+)")


@dataclass(frozen=True)
class AgendaInfo:
    """Agenda signal extracted from a meeting description."""
    has_agenda: bool = False
    length: int = 0
    topics_count: int = 0


@dataclass(frozen=True)
class NotesInfo:
    """Signals extracted from meeting notes."""
    action_items: int = 0
    attention_points: int = 0
    has_accountability: bool = False
    has_deadlines: bool = False


def _keyword_regex(keyword: str) -> re.Pattern:
    # Leading word boundary only, so "note" also counts "notes"
    return re.compile(r"\b" + re.escape(keyword), re.IGNORECASE)


def _count_keywords(text: str, keywords) -> int:
    return sum(len(_keyword_regex(k).findall(text)) for k in keywords)


def _has_whole_word(text: str, keywords) -> bool:
    return any(
        re.search(r"\b" + re.escape(k) + r"\b", text, re.IGNORECASE)
        for k in keywords
    )


def is_generic_title(title: Optional[str]) -> bool:
    """A short title built from stock meeting words ("Weekly Sync", "Daily standup")."""
    if not title:
        return False
    title = title.strip()
    if len(title) >= GENERIC_TITLE_MAX_LENGTH:
        return False
    lowered = title.lower()
    return any(keyword in lowered for keyword in GENERIC_TITLE_KEYWORDS)


def extract_agenda_from_description(description: Optional[str]) -> AgendaInfo:
    """
    Detect whether a description carries an agenda.

    An agenda is recognized by agenda keywords, a bulleted or numbered
    list, or at least three non-empty lines. Topics are the list items.
    """
    if not description or not description.strip():
        return AgendaInfo()

    lines = [line for line in description.splitlines() if line.strip()]
    list_items = [
        line for line in lines
        if _BULLET_LINE.match(line) or _NUMBERED_LINE.match(line)
    ]

    lowered = description.lower()
    has_keyword = any(keyword in lowered for keyword in AGENDA_KEYWORDS)
    has_agenda = has_keyword or bool(list_items) or len(lines) >= 3

    return AgendaInfo(
        has_agenda=has_agenda,
        length=len(description),
        topics_count=len(list_items),
    )


def has_deadline_signal(text: str) -> bool:
    """True when the text names a deadline or contains a date."""
    if _has_whole_word(text, DEADLINE_KEYWORDS):
        return True
    return any(pattern.search(text.lower()) for pattern in DATE_PATTERNS)


def extract_keywords_from_notes(notes: Optional[str]) -> NotesInfo:
    """Count action items and attention points and detect ownership and deadlines."""
    if not notes:
        return NotesInfo()

    return NotesInfo(
        action_items=_count_keywords(notes, ACTION_KEYWORDS),
        attention_points=_count_keywords(notes, ATTENTION_KEYWORDS),
        has_accountability=_has_whole_word(notes, ACCOUNTABILITY_KEYWORDS),
        has_deadlines=has_deadline_signal(notes),
    )


def extract_google_doc_id(description: Optional[str]) -> Optional[str]:
    """Pull a Google Doc id out of a docs.google.com link, if any."""
    if not description:
        return None
    match = _GOOGLE_DOC_URL.search(description)
    return match.group(1) if match else None


def extract_text_from_doc(document: Dict[str, Any]) -> str:
    """Flatten a Google Docs API document body into plain text."""
    body = (document or {}).get("body") or {}
    parts = []
    for element in body.get("content") or []:
        paragraph = element.get("paragraph")
        if not paragraph:
            continue
        for run in paragraph.get("elements") or []:
            content = (run.get("textRun") or {}).get("content")
            if content:
                parts.append(content)
    return "".join(parts)
