"""Adapters - I/O implementations of ports."""

from .memory_store import InMemoryAssignmentStore, StoreSubscription
from .file_store import FileAssignmentStore
from .lms import LMSAdapter
from .canvas import CanvasAdapter
from .google_classroom import GoogleClassroomAdapter

__all__ = [
    "InMemoryAssignmentStore",
    "StoreSubscription",
    "FileAssignmentStore",
    "LMSAdapter",
    "CanvasAdapter",
    "GoogleClassroomAdapter",
]
