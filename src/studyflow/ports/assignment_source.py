"""External assignment source interface."""

from datetime import datetime
from typing import Protocol

from studyflow.config import ConnectionConfig
from studyflow.core.assignments import Assignment, AssignmentSource as SourceKind


class AssignmentSource(Protocol):
    """Interface for pulling assignments from a learning-management system."""

    source: SourceKind
    connection: ConnectionConfig

    def test_connection(self) -> bool:
        """Probe the service and persist the connected flag."""
        ...

    def fetch_assignments(self, as_of: datetime | None = None) -> list[Assignment]:
        """Fetch and normalize work items. Never raises; empty on failure."""
        ...

    def disconnect(self) -> None:
        """Forget the token and mark the source disconnected."""
        ...
