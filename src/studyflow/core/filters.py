"""Search and filter pipeline - pure functions, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime

from .assignments import Assignment, sort_by_due_date

ALL = "all"


@dataclass
class FilterState:
    """User-selected filters. Neutral values let everything pending through."""

    query: str = ""
    subject: str = ALL
    priority: str = ALL
    include_completed: bool = False


def matches_query(assignment: Assignment, query: str) -> bool:
    """Blank query, or case-insensitive substring of title/description/subject."""
    if not query.strip():
        return True
    needle = query.lower()
    return (
        needle in assignment.title.lower()
        or needle in assignment.description.lower()
        or needle in assignment.subject.lower()
    )


def matches(assignment: Assignment, state: FilterState) -> bool:
    """All filters must hold."""
    if not matches_query(assignment, state.query):
        return False
    if state.subject != ALL and assignment.subject != state.subject:
        return False
    if state.priority != ALL and assignment.priority.name.lower() != state.priority.lower():
        return False
    if not state.include_completed and assignment.completed:
        return False
    return True


def filter_assignments(assignments: list[Assignment], state: FilterState) -> list[Assignment]:
    """Apply a FilterState, ascending by due date."""
    return sort_by_due_date([a for a in assignments if matches(a, state)])


def search(assignments: list[Assignment], query: str) -> list[Assignment]:
    """Query-only match over every record, completed included."""
    return [a for a in assignments if matches_query(a, query)]


def filter_by_date_range(
    assignments: list[Assignment],
    start: datetime,
    end: datetime,
) -> list[Assignment]:
    """Assignments due within [start, end], ascending."""
    return sort_by_due_date([a for a in assignments if start <= a.due_date <= end])


def filter_due_on(assignments: list[Assignment], day: date) -> list[Assignment]:
    """Assignments due on a calendar day."""
    return sort_by_due_date([a for a in assignments if a.due_date.date() == day])


def group_by_due_date(assignments: list[Assignment]) -> dict[date, list[Assignment]]:
    """Group by due day, days ascending."""
    groups: dict[date, list[Assignment]] = {}
    for assignment in sort_by_due_date(assignments):
        groups.setdefault(assignment.due_date.date(), []).append(assignment)
    return groups
