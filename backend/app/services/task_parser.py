"""Rule-based parser for free-form task descriptions.

Turns input such as ``"Call client Rajeev tomorrow 5pm P1"`` into a
``ParsedTask``. Extraction runs as an ordered series of stages over a working
text buffer: priority, time, date, assignee, then name. Every stage removes the
span it matched so later stages never see it again.

Malformed input never raises. Problems are reported as warnings on the result
and the affected field keeps its default.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, FrozenSet, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = "P3"
UNTITLED_TASK = "Untitled Task"

NO_NAME_WARNING = "No task name could be extracted from the input"
NO_ASSIGNEE_WARNING = "No assignee identified in the task"
NO_DUE_DATE_WARNING = "No due date specified"

COMMON_VERBS: Tuple[str, ...] = (
    "finish",
    "complete",
    "review",
    "create",
    "update",
    "send",
    "call",
    "deploy",
    "check",
    "write",
    "take",
    "take care of",
)

KNOWN_COMPANIES: FrozenSet[str] = frozenset(
    {
        "microsoft",
        "google",
        "apple",
        "amazon",
        "facebook",
        "meta",
        "netflix",
        "tesla",
        "ibm",
        "oracle",
        "salesforce",
        "adobe",
        "intel",
        "cisco",
        "samsung",
        "sony",
    }
)

COMMON_NAMES: Tuple[str, ...] = (
    "aman",
    "sarah",
    "john",
    "alex",
    "david",
    "michael",
    "emma",
    "olivia",
    "rajeev",
    "shreya",
    "priya",
    "rahul",
    "james",
    "sophia",
)


@dataclass
class ParsedTask:
    """Structured fields pulled out of one task description."""

    name: str = ""
    assignee: Optional[str] = None
    due_date: Optional[datetime] = None
    due_time: Optional[str] = None
    priority: str = DEFAULT_PRIORITY
    is_valid: bool = False
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AssigneeLexicon:
    """Word lists consulted when deciding whether a word names a person."""

    verbs: Tuple[str, ...] = COMMON_VERBS
    companies: FrozenSet[str] = KNOWN_COMPANIES
    names: Tuple[str, ...] = COMMON_NAMES

    def is_excluded(self, word: str) -> bool:
        lowered = word.lower()
        return lowered in self.verbs or lowered in self.companies


DEFAULT_LEXICON = AssigneeLexicon()

_PRIORITY_PATTERN = re.compile(r"\bP([1-4])\b", re.IGNORECASE)

_TIME_PATTERNS = (
    re.compile(r"\b(\d{1,2}:\d{2}(?:am|pm|AM|PM)?)\b"),
    re.compile(r"\b(\d{1,2}(?:am|pm|AM|PM))\b"),
    re.compile(r"\b(\d{1,2}:\d{2})\b"),
)
_TIME_PARTS = re.compile(r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)?", re.IGNORECASE)

_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_LEADING_FILLERS = (
    re.compile(r"^to\s+", re.IGNORECASE),
    re.compile(r"^you\s+", re.IGNORECASE),
    re.compile(r"^please\s+", re.IGNORECASE),
)

_LEADING_ADDRESSEE = re.compile(r"^([A-Z][a-z]+)\s+(?i:you)\b")
_ASSIGNEE_MARKER = re.compile(r"\b(by|for|to)\s+([A-Za-z]+)\b", re.IGNORECASE)
_CAPITALIZED_WORD = re.compile(r"\b[A-Z][a-z]+\b")


def _resolve_tomorrow(match: re.Match, now: datetime) -> Optional[datetime]:
    return now + timedelta(days=1)


def _resolve_today(match: re.Match, now: datetime) -> Optional[datetime]:
    return now


def _resolve_weekday(match: re.Match, now: datetime) -> Optional[datetime]:
    target = _WEEKDAYS.index(match.group(1).lower())
    days_ahead = (target - now.weekday()) % 7 or 7
    return now + timedelta(days=days_ahead)


def _resolve_day_month(match: re.Match, now: datetime) -> Optional[datetime]:
    year = int(match.group("year")) if match.group("year") else now.year
    month = _MONTHS[match.group("month").lower()]
    try:
        return datetime(year, month, int(match.group("day")), tzinfo=now.tzinfo)
    except ValueError:
        return None


def _resolve_slash_date(match: re.Match, now: datetime) -> Optional[datetime]:
    month, day = int(match.group(1)), int(match.group(2))
    year = int(match.group(3)) if match.group(3) else now.year
    if year < 100:
        year = 1900 + year if year > 50 else 2000 + year
    try:
        return datetime(year, month, day, tzinfo=now.tzinfo)
    except ValueError:
        return None


_MONTH_ALTERNATION = "|".join(sorted(_MONTHS, key=len, reverse=True))

DateResolver = Callable[[re.Match, datetime], Optional[datetime]]

_DATE_RECOGNIZERS: Tuple[Tuple[re.Pattern, DateResolver], ...] = (
    (re.compile(r"\btomorrow\b", re.IGNORECASE), _resolve_tomorrow),
    (
        re.compile(r"\b(?:today|tonight|this\s+evening|this\s+afternoon|this\s+morning)\b", re.IGNORECASE),
        _resolve_today,
    ),
    (re.compile(r"\b(" + "|".join(_WEEKDAYS) + r")\b", re.IGNORECASE), _resolve_weekday),
    (
        re.compile(
            r"\b(?P<day>\d{1,2})(?:st|nd|rd|th)?\s+(?P<month>" + _MONTH_ALTERNATION + r")(?:\s+(?P<year>\d{4}))?\b",
            re.IGNORECASE,
        ),
        _resolve_day_month,
    ),
    (re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b"), _resolve_slash_date),
)


def _cut(text: str, match: re.Match) -> str:
    """Remove the matched span from the working text."""
    return (text[: match.start()] + text[match.end() :]).strip()


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _extract_priority(text: str) -> Tuple[Optional[str], str]:
    match = _PRIORITY_PATTERN.search(text)
    if not match:
        return None, text
    return f"P{match.group(1)}", _cut(text, match)


def _extract_time(text: str) -> Tuple[Optional[str], str]:
    for pattern in _TIME_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1), _cut(text, match)
    return None, text


def combine_date_and_time(day: datetime, time_token: str) -> datetime:
    """Apply the hour and minute of ``time_token`` to ``day``.

    Raises ValueError when the token names an impossible time such as ``25:00``.
    """
    match = _TIME_PARTS.match(time_token)
    if not match:
        return day

    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    period = (match.group(3) or "").lower()
    if period == "pm" and hours != 12:
        hours += 12
    elif period == "am" and hours == 12:
        hours = 0

    return day.replace(hour=hours, minute=minutes, second=0, microsecond=0)


def _extract_due_date(
    text: str,
    due_time: Optional[str],
    now: datetime,
    warnings: List[str],
) -> Tuple[Optional[datetime], str]:
    for pattern, resolve in _DATE_RECOGNIZERS:
        match = pattern.search(text)
        if not match:
            continue

        remaining = _cut(text, match)
        resolved = resolve(match, now)
        if resolved is None:
            warnings.append(f"Could not parse date: {match.group(0)}")
            return None, remaining

        if due_time:
            try:
                resolved = combine_date_and_time(resolved, due_time)
            except ValueError:
                warnings.append(f"Could not parse time: {due_time}")
        return resolved, remaining

    return None, text


def _first_verb(text: str, verbs: Tuple[str, ...]) -> Optional[str]:
    for verb in verbs:
        match = re.search(rf"\b{re.escape(verb)}\b", text, re.IGNORECASE)
        if match:
            return match.group(0)
    return None


def _extract_assignee(text: str, lexicon: AssigneeLexicon) -> Tuple[Optional[str], str]:
    match = _LEADING_ADDRESSEE.match(text)
    if match:
        logger.debug("Assignee via leading address: %s", match.group(1))
        return _capitalize(match.group(1)), _cut(text, match)

    match = _ASSIGNEE_MARKER.search(text)
    if match:
        candidate = match.group(2)
        if candidate.lower() not in lexicon.companies:
            logger.debug("Assignee via marker %r: %s", match.group(1), candidate)
            return _capitalize(candidate), _cut(text, match)
        logger.debug("Marker target %s is a company, not an assignee", candidate)

    for match in _CAPITALIZED_WORD.finditer(text):
        if not lexicon.is_excluded(match.group(0)):
            logger.debug("Assignee via capitalization: %s", match.group(0))
            return _capitalize(match.group(0)), _cut(text, match)

    verb = _first_verb(text, lexicon.verbs)
    for name in lexicon.names:
        if verb and name == verb.lower():
            continue
        match = re.search(rf"\b{re.escape(name)}\b", text, re.IGNORECASE)
        if match:
            logger.debug("Assignee via common names: %s", match.group(0))
            return _capitalize(match.group(0)), _cut(text, match)

    return None, text


def _clean_name(text: str) -> str:
    name = re.sub(r"\s+", " ", text).strip()
    for filler in _LEADING_FILLERS:
        name = filler.sub("", name, count=1).strip()
    return name


def parse_task(
    text: str,
    now: Optional[datetime] = None,
    lexicon: AssigneeLexicon = DEFAULT_LEXICON,
) -> ParsedTask:
    """Extract priority, due date/time, assignee and name from ``text``.

    ``now`` anchors relative dates such as "tomorrow" or "friday" and defaults
    to the current local time.
    """
    now = now or datetime.now()
    result = ParsedTask()
    working = (text or "").strip()

    priority, working = _extract_priority(working)
    if priority:
        result.priority = priority

    result.due_time, working = _extract_time(working)
    result.due_date, working = _extract_due_date(working, result.due_time, now, result.warnings)
    result.assignee, working = _extract_assignee(working, lexicon)

    result.name = _clean_name(working)
    if not result.name:
        result.name = UNTITLED_TASK
        result.warnings.append(NO_NAME_WARNING)

    # Runs after the sentinel substitution, so every result is valid.
    result.is_valid = len(result.name) > 0

    if not result.assignee:
        result.warnings.append(NO_ASSIGNEE_WARNING)
    if not result.due_date:
        result.warnings.append(NO_DUE_DATE_WARNING)

    logger.debug(
        "Parsed task name=%r assignee=%s due=%s priority=%s",
        result.name,
        result.assignee,
        result.due_date.isoformat() if result.due_date else None,
        result.priority,
    )
    return result
