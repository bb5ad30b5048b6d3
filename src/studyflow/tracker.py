"""Assignment tracker - user-facing operations and live views over the store."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from .core.assignments import (
    Assignment,
    AssignmentSource,
    Priority,
    ValidationError,
)
from .core.classification import (
    AssignmentStats,
    UrgencyTiers,
    classify,
    completed_view,
    compute_stats,
)
from .core.filters import FilterState, filter_assignments
from .core.normalize import subject_color
from .ports.assignment_store import AssignmentStore, Subscription

logger = logging.getLogger(__name__)


def is_pending(assignment: Assignment) -> bool:
    return not assignment.completed


def is_completed(assignment: Assignment) -> bool:
    return assignment.completed


class AssignmentTracker:
    """
    Manual entry, completion and derived views.

    Synced records only enter through the sync orchestrator; here they can
    be completed or deleted but not created or edited.
    """

    def __init__(self, store: AssignmentStore, timezone: str = "America/Toronto"):
        self.store = store
        self.tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def _localize(self, value: datetime) -> datetime:
        """Treat naive datetimes as local time."""
        if value.tzinfo is None:
            return value.replace(tzinfo=self.tz)
        return value

    # ---- mutations ----

    def add_assignment(
        self,
        title: str,
        due_date: datetime,
        *,
        description: str = "",
        subject: str = "other",
        course_name: str = "",
        due_time: str | None = None,
        priority: Priority = Priority.MEDIUM,
        custom_color: str | None = None,
        source: AssignmentSource = AssignmentSource.MANUAL,
        estimated_hours: float = 0.0,
        tags: list[str] | None = None,
        attachments: list[str] | None = None,
        notes: str = "",
    ) -> Assignment:
        """Create a manual assignment and return it with its new id."""
        if source is not AssignmentSource.MANUAL:
            raise ValidationError(f"{source.display_name} assignments can only be added by sync")

        due_date = self._localize(due_date)
        subject = subject.strip().lower() or "other"
        assignment = Assignment(
            title=title.strip(),
            due_date=due_date,
            description=description,
            subject=subject,
            course_name=course_name,
            due_time=due_time or due_date.strftime("%H:%M"),
            priority=priority,
            custom_color=custom_color or subject_color(subject),
            source=source,
            created_at=self.now(),
            estimated_hours=estimated_hours,
            tags=list(tags or []),
            attachments=list(attachments or []),
            notes=notes,
        )
        assignment.validate()
        assignment.id = self.store.insert(assignment)
        logger.debug(f"Added assignment {assignment.id}: {assignment.title}")
        return assignment

    def edit_assignment(self, assignment: Assignment) -> Assignment | None:
        """
        Save changes to a manual assignment.

        Identity, origin and creation time are kept from the stored copy.
        Returns None if the id is unknown.
        """
        if assignment.id is None:
            return None
        stored = self.store.get_by_id(assignment.id)
        if stored is None:
            return None
        if not stored.is_manual:
            raise ValidationError(f"{stored.source.display_name} assignments cannot be edited")

        edited = replace(
            assignment,
            title=assignment.title.strip(),
            due_date=self._localize(assignment.due_date),
            source=stored.source,
            created_at=stored.created_at,
        )
        edited.validate()
        self.store.update(edited)
        return edited

    def toggle_completion(self, assignment_id: int, now: datetime | None = None) -> Assignment | None:
        """Flip completion. Returns the updated record, or None if not found."""
        stored = self.store.get_by_id(assignment_id)
        if stored is None:
            return None
        toggled = stored.toggled(self._localize(now) if now else self.now())
        self.store.update(toggled)
        return toggled

    def delete(self, assignment_id: int) -> bool:
        return self.store.delete_by_id(assignment_id)

    def delete_all_completed(self) -> int:
        return self.store.delete_where(is_completed)

    def delete_all(self) -> int:
        return self.store.delete_where(lambda a: True)

    # ---- snapshots ----

    def get(self, assignment_id: int) -> Assignment | None:
        return self.store.get_by_id(assignment_id)

    def all(self) -> list[Assignment]:
        return self.store.query()

    def pending(self) -> list[Assignment]:
        return self.store.query(is_pending)

    def completed(self) -> list[Assignment]:
        return completed_view(self.store.query(is_completed))

    def tiers(self, now: datetime | None = None) -> UrgencyTiers:
        return classify(self.pending(), now or self.now())

    def stats(self, now: datetime | None = None) -> AssignmentStats:
        everything = self.store.query()
        pending = [a for a in everything if is_pending(a)]
        done = [a for a in everything if is_completed(a)]
        return compute_stats(pending, done, now or self.now())

    def filtered(self, state: FilterState) -> list[Assignment]:
        return filter_assignments(self.store.query(), state)

    # ---- live views ----

    def watch_tiers(
        self,
        listener: Callable[[UrgencyTiers], None],
        now: datetime | None = None,
    ) -> Subscription:
        """Re-classify pending work on every change. now=None means "at delivery"."""
        return self.store.observe(
            is_pending,
            lambda pending: listener(classify(pending, now or self.now())),
        )

    def watch_stats(
        self,
        listener: Callable[[AssignmentStats], None],
        now: datetime | None = None,
    ) -> Subscription:
        def deliver(everything: list[Assignment]) -> None:
            pending = [a for a in everything if is_pending(a)]
            done = [a for a in everything if is_completed(a)]
            listener(compute_stats(pending, done, now or self.now()))

        return self.store.observe(None, deliver)

    def watch_completed(self, listener: Callable[[list[Assignment]], None]) -> Subscription:
        return self.store.observe(is_completed, lambda done: listener(completed_view(done)))

    def watch_filtered(
        self,
        state: FilterState,
        listener: Callable[[list[Assignment]], None],
    ) -> Subscription:
        return self.store.observe(None, lambda everything: listener(filter_assignments(everything, state)))
