"""Pure assignment domain model - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

DEFAULT_COLOR = "#667eea"
DEFAULT_DUE_TIME = "23:59"


def local_now() -> datetime:
    """Current time in the system's local timezone, tz-aware."""
    return datetime.now().astimezone()


class StudyFlowError(Exception):
    """Base class for StudyFlow errors."""


class ValidationError(StudyFlowError):
    """Raised when an assignment cannot be created or edited as given."""


class Priority(Enum):
    """Stored priority of an assignment."""

    LOW = ("Low", "#10b981")
    MEDIUM = ("Medium", "#f59e0b")
    HIGH = ("High", "#ef4444")

    @property
    def display_name(self) -> str:
        return self.value[0]

    @property
    def color(self) -> str:
        return self.value[1]


class AssignmentSource(Enum):
    """Where an assignment record came from."""

    MANUAL = "Manual"
    CANVAS = "Canvas LMS"
    GOOGLE_CLASSROOM = "Google Classroom"
    BLACKBOARD = "Blackboard"
    MOODLE = "Moodle"

    @property
    def display_name(self) -> str:
        return self.value


@dataclass
class Assignment:
    """A unit of schoolwork with a due date, tracked for completion."""

    title: str
    due_date: datetime
    id: int | None = None
    description: str = ""
    subject: str = "other"
    course_name: str = ""
    due_time: str = DEFAULT_DUE_TIME
    completed: bool = False
    completed_at: datetime | None = None
    priority: Priority = Priority.MEDIUM
    custom_color: str = DEFAULT_COLOR
    source: AssignmentSource = AssignmentSource.MANUAL
    created_at: datetime = field(default_factory=local_now)
    estimated_hours: float = 0.0
    actual_hours: float = 0.0
    tags: list[str] = field(default_factory=list)
    attachments: list[str] = field(default_factory=list)
    notes: str = ""

    @property
    def is_manual(self) -> bool:
        return self.source is AssignmentSource.MANUAL

    @property
    def dedup_key(self) -> tuple[str, str, str]:
        """Identity of a synced record: (source, course, title)."""
        return (self.source.name, self.course_name, self.title)

    def is_overdue(self, now: datetime) -> bool:
        return not self.completed and self.due_date < now

    def toggled(self, now: datetime) -> "Assignment":
        """Copy with completion flipped; completed_at follows the flag."""
        if self.completed:
            return replace(self, completed=False, completed_at=None)
        return replace(self, completed=True, completed_at=now)

    def copy(self) -> "Assignment":
        """Copy that shares no mutable lists with this one."""
        return replace(self, tags=list(self.tags), attachments=list(self.attachments))

    def validate(self) -> None:
        """Raise ValidationError if the record breaks a model invariant."""
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValidationError("Assignment title must not be empty")
        if self.completed != (self.completed_at is not None):
            raise ValidationError("completed_at must be set exactly when completed")

    def to_dict(self) -> dict:
        """Serialize to JSON-friendly primitives."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "subject": self.subject,
            "course_name": self.course_name,
            "due_date": self.due_date.isoformat(),
            "due_time": self.due_time,
            "completed": self.completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "priority": self.priority.name,
            "custom_color": self.custom_color,
            "source": self.source.name,
            "created_at": self.created_at.isoformat(),
            "estimated_hours": self.estimated_hours,
            "actual_hours": self.actual_hours,
            "tags": list(self.tags),
            "attachments": list(self.attachments),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Assignment":
        """Create Assignment from a dict produced by to_dict."""
        completed_at = data.get("completed_at")
        return cls(
            id=data.get("id"),
            title=data["title"],
            description=data.get("description", ""),
            subject=data.get("subject", "other"),
            course_name=data.get("course_name", ""),
            due_date=datetime.fromisoformat(data["due_date"]),
            due_time=data.get("due_time", DEFAULT_DUE_TIME),
            completed=data.get("completed", False),
            completed_at=datetime.fromisoformat(completed_at) if completed_at else None,
            priority=Priority[data.get("priority", "MEDIUM")],
            custom_color=data.get("custom_color", DEFAULT_COLOR),
            source=AssignmentSource[data.get("source", "MANUAL")],
            created_at=datetime.fromisoformat(data["created_at"])
            if data.get("created_at")
            else local_now(),
            estimated_hours=float(data.get("estimated_hours", 0.0)),
            actual_hours=float(data.get("actual_hours", 0.0)),
            tags=list(data.get("tags", [])),
            attachments=list(data.get("attachments", [])),
            notes=data.get("notes", ""),
        )


def sort_by_due_date(assignments: list[Assignment]) -> list[Assignment]:
    """Ascending by due date."""
    return sorted(assignments, key=lambda a: a.due_date)
