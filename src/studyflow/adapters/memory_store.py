"""In-memory assignment store with live queries."""

import logging
import threading
from dataclasses import replace
from itertools import count
from typing import Callable

from studyflow.core.assignments import Assignment, sort_by_due_date

logger = logging.getLogger(__name__)

Predicate = Callable[[Assignment], bool]
Listener = Callable[[list[Assignment]], None]


class StoreSubscription:
    """A registered live query. Cancelling is idempotent."""

    def __init__(self, store: "InMemoryAssignmentStore", predicate: Predicate | None, listener: Listener):
        self._store = store
        self.predicate = predicate
        self.listener = listener
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._store._unsubscribe(self)


class InMemoryAssignmentStore:
    """
    Assignment store kept in a dict.

    Implements AssignmentStore protocol. Ids are assigned on insert, counting
    up from 1. Records handed out are copies, so callers cannot mutate the
    store behind its back. Every mutation re-runs all live queries.
    """

    def __init__(self, assignments: list[Assignment] | None = None):
        self._lock = threading.RLock()
        self._records: dict[int, Assignment] = {}
        self._subscriptions: list[StoreSubscription] = []
        for assignment in assignments or []:
            if assignment.id is not None:
                self._records[assignment.id] = assignment.copy()
        self._ids = count(max(self._records, default=0) + 1)

    def _select(self, predicate: Predicate | None) -> list[Assignment]:
        with self._lock:
            records = [a.copy() for a in self._records.values()]
        if predicate is not None:
            records = [a for a in records if predicate(a)]
        return sort_by_due_date(records)

    def _unsubscribe(self, subscription: StoreSubscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def _deliver(self, subscription: StoreSubscription) -> None:
        try:
            subscription.listener(self._select(subscription.predicate))
        except Exception:
            logger.exception("Store listener failed")

    def _commit(self) -> None:
        """Hook run after each mutation, before listeners are notified."""

    def _changed(self) -> None:
        """
        Commit, then notify listeners.

        A failed commit leaves the in-memory change in place; listeners still
        see it and the error is re-raised to the caller afterwards.
        """
        failure = None
        with self._lock:
            try:
                self._commit()
            except OSError as e:
                logger.error(f"Could not persist assignment store: {e}")
                failure = e
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            if subscription.active:
                self._deliver(subscription)
        if failure is not None:
            raise failure

    def observe(self, predicate: Predicate | None, listener: Listener) -> StoreSubscription:
        """Call listener with matching records now and after every mutation."""
        subscription = StoreSubscription(self, predicate, listener)
        with self._lock:
            self._subscriptions.append(subscription)
        self._deliver(subscription)
        return subscription

    def query(self, predicate: Predicate | None = None) -> list[Assignment]:
        """Snapshot of matching records, ascending by due date."""
        return self._select(predicate)

    def get_by_id(self, assignment_id: int) -> Assignment | None:
        with self._lock:
            record = self._records.get(assignment_id)
            return record.copy() if record else None

    def insert(self, assignment: Assignment) -> int:
        """Store a new record under a fresh id and return the id."""
        with self._lock:
            assignment_id = next(self._ids)
            self._records[assignment_id] = replace(assignment.copy(), id=assignment_id)
        self._changed()
        return assignment_id

    def update(self, assignment: Assignment) -> bool:
        with self._lock:
            if assignment.id not in self._records:
                return False
            self._records[assignment.id] = assignment.copy()
        self._changed()
        return True

    def delete_by_id(self, assignment_id: int) -> bool:
        with self._lock:
            if self._records.pop(assignment_id, None) is None:
                return False
        self._changed()
        return True

    def delete_where(self, predicate: Predicate) -> int:
        with self._lock:
            doomed = [i for i, a in self._records.items() if predicate(a)]
            for assignment_id in doomed:
                del self._records[assignment_id]
        if doomed:
            self._changed()
        return len(doomed)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
