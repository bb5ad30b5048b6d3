"""Tests for the assignment model."""

from datetime import datetime, timedelta, timezone

import pytest

from studyflow.core.assignments import (
    Assignment,
    AssignmentSource,
    Priority,
    ValidationError,
    sort_by_due_date,
)


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def assignment(now):
    return Assignment(
        id=7,
        title="Lab report",
        due_date=now + timedelta(days=2),
        subject="science",
        course_name="Biology 101",
        tags=["lab"],
        created_at=now,
    )


class TestDefaults:
    def test_defaults(self, now):
        a = Assignment(title="Essay", due_date=now)
        assert a.id is None
        assert a.due_time == "23:59"
        assert a.priority is Priority.MEDIUM
        assert a.source is AssignmentSource.MANUAL
        assert a.custom_color == "#667eea"
        assert a.completed is False
        assert a.completed_at is None
        assert a.tags == []
        assert a.created_at.tzinfo is not None

    def test_enum_display(self):
        assert Priority.HIGH.display_name == "High"
        assert Priority.HIGH.color == "#ef4444"
        assert AssignmentSource.CANVAS.display_name == "Canvas LMS"


class TestToggled:
    def test_completing_sets_completed_at(self, assignment, now):
        done = assignment.toggled(now)
        assert done.completed is True
        assert done.completed_at == now

    def test_reopening_clears_completed_at(self, assignment, now):
        reopened = assignment.toggled(now).toggled(now + timedelta(hours=1))
        assert reopened.completed is False
        assert reopened.completed_at is None

    def test_toggle_twice_restores_everything_else(self, assignment, now):
        assert assignment.toggled(now).toggled(now) == assignment

    def test_does_not_mutate_original(self, assignment, now):
        assignment.toggled(now)
        assert assignment.completed is False


class TestValidate:
    def test_empty_title_rejected(self, now):
        with pytest.raises(ValidationError):
            Assignment(title="   ", due_date=now).validate()

    def test_missing_title_rejected(self, now):
        with pytest.raises(ValidationError):
            Assignment(title=None, due_date=now).validate()

    def test_completed_without_timestamp_rejected(self, now):
        with pytest.raises(ValidationError):
            Assignment(title="Essay", due_date=now, completed=True).validate()

    def test_timestamp_without_completed_rejected(self, now):
        with pytest.raises(ValidationError):
            Assignment(title="Essay", due_date=now, completed_at=now).validate()

    def test_valid(self, assignment):
        assignment.validate()


class TestSerialization:
    def test_round_trip(self, assignment, now):
        done = assignment.toggled(now)
        restored = Assignment.from_dict(done.to_dict())
        assert restored == done

    def test_enums_stored_by_name(self, assignment):
        data = assignment.to_dict()
        assert data["priority"] == "MEDIUM"
        assert data["source"] == "MANUAL"

    def test_from_dict_fills_defaults(self):
        a = Assignment.from_dict({"title": "Quiz", "due_date": "2025-01-20T09:00:00+00:00"})
        assert a.subject == "other"
        assert a.priority is Priority.MEDIUM
        assert a.due_date == datetime(2025, 1, 20, 9, 0, tzinfo=timezone.utc)


class TestHelpers:
    def test_dedup_key(self, assignment):
        assert assignment.dedup_key == ("MANUAL", "Biology 101", "Lab report")

    def test_copy_does_not_share_lists(self, assignment):
        clone = assignment.copy()
        clone.tags.append("extra")
        assert assignment.tags == ["lab"]

    def test_is_overdue(self, assignment, now):
        assert assignment.is_overdue(now) is False
        assert assignment.is_overdue(now + timedelta(days=3)) is True
        assert assignment.toggled(now).is_overdue(now + timedelta(days=3)) is False

    def test_sort_by_due_date(self, now):
        later = Assignment(title="Later", due_date=now + timedelta(days=2))
        sooner = Assignment(title="Sooner", due_date=now + timedelta(days=1))
        assert [a.title for a in sort_by_due_date([later, sooner])] == ["Sooner", "Later"]
