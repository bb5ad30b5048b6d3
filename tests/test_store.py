"""Tests for the assignment store adapters."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from studyflow.adapters.file_store import FileAssignmentStore
from studyflow.adapters.memory_store import InMemoryAssignmentStore
from studyflow.core.assignments import Assignment


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make(now):
    def _make(title: str, days: int = 1) -> Assignment:
        return Assignment(title=title, due_date=now + timedelta(days=days), created_at=now)

    return _make


@pytest.fixture
def store():
    return InMemoryAssignmentStore()


class TestCrud:
    def test_insert_assigns_sequential_ids(self, store, make):
        assert store.insert(make("a")) == 1
        assert store.insert(make("b")) == 2
        assert len(store) == 2

    def test_insert_does_not_touch_argument(self, store, make):
        a = make("a")
        store.insert(a)
        assert a.id is None

    def test_get_by_id(self, store, make):
        assignment_id = store.insert(make("a"))
        assert store.get_by_id(assignment_id).title == "a"
        assert store.get_by_id(99) is None

    def test_returned_records_are_copies(self, store, make):
        assignment_id = store.insert(make("a"))
        record = store.get_by_id(assignment_id)
        record.title = "changed"
        record.tags.append("x")
        assert store.get_by_id(assignment_id).title == "a"
        assert store.get_by_id(assignment_id).tags == []

    def test_update(self, store, make, now):
        assignment_id = store.insert(make("a"))
        record = store.get_by_id(assignment_id).toggled(now)
        assert store.update(record) is True
        assert store.get_by_id(assignment_id).completed is True

    def test_update_unknown(self, store, make):
        ghost = make("ghost")
        ghost.id = 42
        assert store.update(ghost) is False

    def test_delete_by_id(self, store, make):
        assignment_id = store.insert(make("a"))
        assert store.delete_by_id(assignment_id) is True
        assert store.delete_by_id(assignment_id) is False

    def test_delete_where(self, store, make):
        store.insert(make("keep"))
        store.insert(make("drop 1"))
        store.insert(make("drop 2"))
        assert store.delete_where(lambda a: a.title.startswith("drop")) == 2
        assert [a.title for a in store.query()] == ["keep"]

    def test_query_sorted_by_due_date(self, store, make):
        store.insert(make("late", days=5))
        store.insert(make("early", days=1))
        assert [a.title for a in store.query()] == ["early", "late"]

    def test_query_predicate(self, store, make):
        store.insert(make("a"))
        store.insert(make("b"))
        assert [a.title for a in store.query(lambda a: a.title == "b")] == ["b"]


class TestObserve:
    def test_delivers_immediately(self, store, make):
        store.insert(make("a"))
        received = []
        store.observe(None, received.append)
        assert [[a.title for a in batch] for batch in received] == [["a"]]

    def test_redelivers_after_each_mutation(self, store, make):
        received = []
        store.observe(None, received.append)
        assignment_id = store.insert(make("a"))
        store.delete_by_id(assignment_id)
        assert [len(batch) for batch in received] == [0, 1, 0]

    def test_predicate_applied(self, store, make):
        received = []
        store.observe(lambda a: a.title == "wanted", received.append)
        store.insert(make("other"))
        store.insert(make("wanted"))
        assert [[a.title for a in batch] for batch in received] == [[], [], ["wanted"]]

    def test_cancel_stops_delivery(self, store, make):
        received = []
        subscription = store.observe(None, received.append)
        subscription.cancel()
        subscription.cancel()
        store.insert(make("a"))
        assert len(received) == 1

    def test_failing_listener_does_not_block_others(self, store, make):
        def broken(_):
            raise RuntimeError("boom")

        received = []
        store.observe(None, broken)
        store.observe(None, received.append)
        store.insert(make("a"))
        assert len(received) == 2

    def test_noop_delete_where_does_not_notify(self, store):
        received = []
        store.observe(None, received.append)
        assert store.delete_where(lambda a: True) == 0
        assert len(received) == 1


class TestFileStore:
    def test_persists_across_instances(self, tmp_path, make, now):
        path = tmp_path / "data" / "assignments.json"
        store = FileAssignmentStore(path)
        first = store.insert(make("a"))
        store.update(store.get_by_id(first).toggled(now))
        store.insert(make("b"))

        reopened = FileAssignmentStore(path)
        assert [a.title for a in reopened.query()] == ["a", "b"]
        assert reopened.get_by_id(first).completed_at == now

    def test_ids_continue_after_reload(self, tmp_path, make):
        path = tmp_path / "assignments.json"
        store = FileAssignmentStore(path)
        store.insert(make("a"))
        store.insert(make("b"))
        store.delete_by_id(1)

        assert FileAssignmentStore(path).insert(make("c")) == 3

    def test_missing_file_is_empty(self, tmp_path):
        assert FileAssignmentStore(tmp_path / "nope.json").query() == []

    def test_corrupt_file_is_empty(self, tmp_path):
        path = tmp_path / "assignments.json"
        path.write_text("{not json")
        assert FileAssignmentStore(path).query() == []

    def test_failed_write_still_notifies(self, tmp_path, make):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = FileAssignmentStore(blocker / "assignments.json")
        received = []
        store.observe(None, received.append)

        with pytest.raises(OSError):
            store.insert(make("a"))

        assert len(store) == 1
        assert [[a.title for a in batch] for batch in received] == [[], ["a"]]

    def test_skips_unreadable_records(self, tmp_path, make):
        path = tmp_path / "assignments.json"
        good = make("good")
        good.id = 1
        path.write_text(json.dumps({"assignments": [good.to_dict(), {"id": 2}]}))
        assert [a.title for a in FileAssignmentStore(path).query()] == ["good"]
