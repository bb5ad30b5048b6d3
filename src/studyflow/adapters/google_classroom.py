"""Google Classroom adapter - REST client for coursework fetching."""

from datetime import datetime

from studyflow.core.assignments import Assignment, AssignmentSource
from studyflow.core.normalize import CLASSROOM_THRESHOLDS

from .lms import LMSAdapter

CLASSROOM_API_BASE = "https://classroom.googleapis.com/v1"


class GoogleClassroomAdapter(LMSAdapter):
    """
    Google Classroom adapter.

    Implements AssignmentSource protocol. Needs only an access token;
    obtaining one is left to the user.
    """

    source = AssignmentSource.GOOGLE_CLASSROOM
    thresholds = CLASSROOM_THRESHOLDS

    def _can_probe(self) -> bool:
        return self.connection.has_credentials

    def _probe_url(self) -> str:
        return f"{CLASSROOM_API_BASE}/courses"

    def _fetch_courses(self) -> list[tuple[str, str]]:
        data = self._get_json(f"{CLASSROOM_API_BASE}/courses", params={"courseStates": "ACTIVE"})
        return [(str(c["id"]), c["name"]) for c in data.get("courses", [])]

    def _fetch_work_items(self, course_id: str) -> list[dict]:
        data = self._get_json(f"{CLASSROOM_API_BASE}/courses/{course_id}/courseWork")
        return data.get("courseWork", [])

    def _due_datetime(self, item: dict) -> datetime | None:
        """Local due date from Classroom's split date/time objects."""
        due_date = item.get("dueDate")
        if not due_date:
            return None
        due_time = item.get("dueTime")
        hour = due_time.get("hours", 23) if due_time is not None else 23
        minute = due_time.get("minutes", 59) if due_time is not None else 59
        return datetime(
            int(due_date["year"]),
            int(due_date["month"]),
            int(due_date["day"]),
            int(hour),
            int(minute),
            tzinfo=self.tz,
        )

    def _parse_item(self, item: dict, course_name: str, now: datetime) -> Assignment | None:
        due = self._due_datetime(item)
        if due is None:
            return None
        return self._build(
            title=item["title"],
            description=item.get("description") or "",
            course_name=course_name,
            due=due,
            now=now,
        )
