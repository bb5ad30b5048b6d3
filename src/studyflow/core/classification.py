"""Urgency tiers and statistics - pure functions, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from enum import Enum

from .assignments import Assignment, Priority, sort_by_due_date

HIGH_PRIORITY_DAYS = 4
COMING_UP_START_DAYS = 5
COMING_UP_END_DAYS = 20
LONG_TERM_DAYS = 21


class Tier(Enum):
    """Urgency tier of a pending assignment."""

    OVERDUE = "overdue"
    HIGH_PRIORITY = "high_priority"
    COMING_UP = "coming_up"
    LONG_TERM = "long_term"


@dataclass
class UrgencyTiers:
    """Pending assignments partitioned by urgency, each ascending by due date."""

    overdue: list[Assignment] = field(default_factory=list)
    high_priority: list[Assignment] = field(default_factory=list)
    coming_up: list[Assignment] = field(default_factory=list)
    long_term: list[Assignment] = field(default_factory=list)

    def by_tier(self) -> dict[Tier, list[Assignment]]:
        return {
            Tier.OVERDUE: self.overdue,
            Tier.HIGH_PRIORITY: self.high_priority,
            Tier.COMING_UP: self.coming_up,
            Tier.LONG_TERM: self.long_term,
        }


@dataclass
class AssignmentStats:
    """Aggregate counts shown on the dashboard."""

    total_active: int = 0
    completed: int = 0
    overdue: int = 0
    high_priority: int = 0
    completion_percentage: float = 0.0
    streak: int = 0


def start_of_day(now: datetime, days_ahead: int) -> datetime:
    return datetime.combine((now + timedelta(days=days_ahead)).date(), time.min, tzinfo=now.tzinfo)


def end_of_day(now: datetime, days_ahead: int) -> datetime:
    return datetime.combine((now + timedelta(days=days_ahead)).date(), time.max, tzinfo=now.tzinfo)


def urgency_tier(assignment: Assignment, now: datetime) -> Tier | None:
    """
    Tier of a single assignment, or None if it is completed.

    Evaluated in precedence order: overdue, then due by the end of day +4,
    then between the start of day +5 and the end of day +20, then later.
    """
    if assignment.completed:
        return None
    due = assignment.due_date
    if due < now:
        return Tier.OVERDUE
    if due <= end_of_day(now, HIGH_PRIORITY_DAYS):
        return Tier.HIGH_PRIORITY
    if start_of_day(now, COMING_UP_START_DAYS) <= due <= end_of_day(now, COMING_UP_END_DAYS):
        return Tier.COMING_UP
    return Tier.LONG_TERM


def classify(pending: list[Assignment], now: datetime) -> UrgencyTiers:
    """Partition pending assignments into urgency tiers."""
    tiers = UrgencyTiers()
    buckets = tiers.by_tier()
    for assignment in sort_by_due_date(pending):
        tier = urgency_tier(assignment, now)
        if tier is not None:
            buckets[tier].append(assignment)
    return tiers


def completed_view(completed: list[Assignment]) -> list[Assignment]:
    """Completed assignments, most recently completed first."""
    done = [a for a in completed if a.completed]
    return sorted(done, key=lambda a: a.completed_at, reverse=True)


def compute_stats(
    pending: list[Assignment],
    completed: list[Assignment],
    now: datetime,
) -> AssignmentStats:
    """
    Dashboard statistics.

    high_priority counts the stored HIGH priority, not the HIGH_PRIORITY
    tier; the two can disagree.
    """
    active = len(pending)
    done = len(completed)
    total = active + done
    return AssignmentStats(
        total_active=active,
        completed=done,
        overdue=sum(1 for a in pending if a.due_date < now),
        high_priority=sum(1 for a in pending if a.priority is Priority.HIGH),
        completion_percentage=(100.0 * done / total) if total else 0.0,
        streak=0,
    )
