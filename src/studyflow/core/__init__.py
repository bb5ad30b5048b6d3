"""Functional core - pure business logic with no I/O."""

from .assignments import (
    Assignment,
    AssignmentSource,
    Priority,
    StudyFlowError,
    ValidationError,
    sort_by_due_date,
)
from .classification import (
    AssignmentStats,
    Tier,
    UrgencyTiers,
    classify,
    completed_view,
    compute_stats,
    urgency_tier,
)
from .filters import FilterState, filter_assignments, search
from .normalize import determine_subject, infer_priority, subject_color

__all__ = [
    # Assignments
    "Assignment",
    "AssignmentSource",
    "Priority",
    "StudyFlowError",
    "ValidationError",
    "sort_by_due_date",
    # Classification
    "AssignmentStats",
    "Tier",
    "UrgencyTiers",
    "classify",
    "completed_view",
    "compute_stats",
    "urgency_tier",
    # Filters
    "FilterState",
    "filter_assignments",
    "search",
    # Normalization
    "determine_subject",
    "infer_priority",
    "subject_color",
]
