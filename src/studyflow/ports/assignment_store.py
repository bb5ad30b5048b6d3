"""Assignment store interface."""

from typing import Callable, Protocol

from studyflow.core.assignments import Assignment

Predicate = Callable[[Assignment], bool]
Listener = Callable[[list[Assignment]], None]


class Subscription(Protocol):
    """Handle for a live query."""

    def cancel(self) -> None:
        """Stop receiving updates."""
        ...


class AssignmentStore(Protocol):
    """Interface for persisting assignments with live queries."""

    def observe(self, predicate: Predicate | None, listener: Listener) -> Subscription:
        """Call listener with matching records now and after every mutation."""
        ...

    def query(self, predicate: Predicate | None = None) -> list[Assignment]:
        """Snapshot of matching records."""
        ...

    def get_by_id(self, assignment_id: int) -> Assignment | None:
        """Fetch a record by id. Returns None if not found."""
        ...

    def insert(self, assignment: Assignment) -> int:
        """Store a new record and return its assigned id."""
        ...

    def update(self, assignment: Assignment) -> bool:
        """Replace the record with the same id. False if not found."""
        ...

    def delete_by_id(self, assignment_id: int) -> bool:
        """Delete one record. False if not found."""
        ...

    def delete_where(self, predicate: Predicate) -> int:
        """Delete matching records and return how many were removed."""
        ...
