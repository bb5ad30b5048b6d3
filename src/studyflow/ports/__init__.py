"""Ports - interfaces/protocols for external dependencies."""

from .assignment_store import AssignmentStore, Subscription
from .assignment_source import AssignmentSource

__all__ = [
    "AssignmentStore",
    "Subscription",
    "AssignmentSource",
]
