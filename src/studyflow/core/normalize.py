"""Shared normalization rules for assignments pulled from external sources.

Pure functions - no I/O. Both LMS adapters map their course names and due
dates through these so subject, colour and priority are inferred the same way.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .assignments import DEFAULT_COLOR, Priority

# Checked in order; first keyword hit wins.
SUBJECT_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("math", ("math", "algebra", "calculus", "geometry")),
    ("science", ("science", "biology", "chemistry", "physics")),
    ("english", ("english", "literature", "writing")),
    ("history", ("history", "social")),
    ("art", ("art", "music", "drama")),
    ("computer", ("computer", "programming", "coding")),
]

SUBJECT_COLORS = {
    "math": "#ef4444",
    "science": "#10b981",
    "english": "#8b5cf6",
    "history": "#f59e0b",
    "art": "#ec4899",
    "computer": "#06b6d4",
    "other": DEFAULT_COLOR,
}

CANVAS_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True)
class PriorityThresholds:
    """Day windows for inferring priority from time-to-due."""

    high_days: int
    medium_days: int


CANVAS_THRESHOLDS = PriorityThresholds(high_days=3, medium_days=7)
CLASSROOM_THRESHOLDS = PriorityThresholds(high_days=4, medium_days=20)


def determine_subject(course_name: str) -> str:
    """Infer a subject tag from a course name by keyword."""
    lowered = course_name.lower()
    for subject, keywords in SUBJECT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return subject
    return "other"


def subject_color(subject: str) -> str:
    return SUBJECT_COLORS.get(subject, DEFAULT_COLOR)


def days_until(due: datetime, now: datetime) -> int:
    """Whole days until due, truncated toward zero (negative once past)."""
    return int((due - now) / timedelta(days=1))


def is_within_days(due: datetime, now: datetime, days: int) -> bool:
    """True when 0 <= days_until(due) <= days."""
    return 0 <= days_until(due, now) <= days


def infer_priority(due: datetime, now: datetime, thresholds: PriorityThresholds) -> Priority:
    """
    Priority from how soon something is due.

    Items already past due by a whole day or more are HIGH: they are still
    pending and nothing is more pressing.
    """
    if days_until(due, now) < 0:
        return Priority.HIGH
    if is_within_days(due, now, thresholds.high_days):
        return Priority.HIGH
    if is_within_days(due, now, thresholds.medium_days):
        return Priority.MEDIUM
    return Priority.LOW


def parse_canvas_date(value: str | None) -> datetime | None:
    """Parse Canvas' ``2025-01-20T23:59:00Z`` format as UTC. None if unusable."""
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, CANVAS_DATE_FORMAT)
    except (TypeError, ValueError):
        return None
    return parsed.replace(tzinfo=timezone.utc)


def format_due_time(due: datetime, tz=None) -> str:
    """HH:MM of a due date, optionally shown in another timezone."""
    if tz is not None:
        due = due.astimezone(tz)
    return due.strftime("%H:%M")
