"""Canvas LMS adapter - REST client for assignment fetching."""

from datetime import datetime

from studyflow.core.assignments import Assignment, AssignmentSource
from studyflow.core.normalize import CANVAS_THRESHOLDS, parse_canvas_date

from .lms import LMSAdapter


class CanvasAdapter(LMSAdapter):
    """
    Canvas LMS adapter.

    Implements AssignmentSource protocol against a school's Canvas instance.
    The base URL comes from the connection settings.
    """

    source = AssignmentSource.CANVAS
    thresholds = CANVAS_THRESHOLDS

    @property
    def base_url(self) -> str:
        return self.connection.base_url.strip().rstrip("/")

    def _can_probe(self) -> bool:
        return bool(self.base_url)

    def _probe_url(self) -> str:
        return f"{self.base_url}/api/v1/users/self"

    def _fetch_courses(self) -> list[tuple[str, str]]:
        courses = self._get_json(
            f"{self.base_url}/api/v1/courses",
            params={"enrollment_state": "active"},
        )
        return [(str(c["id"]), c["name"]) for c in courses]

    def _fetch_work_items(self, course_id: str) -> list[dict]:
        return self._get_json(f"{self.base_url}/api/v1/courses/{course_id}/assignments")

    def _parse_item(self, item: dict, course_name: str, now: datetime) -> Assignment | None:
        due = parse_canvas_date(item.get("due_at"))
        if due is None:
            return None
        return self._build(
            title=item["name"],
            description=item.get("description") or "",
            course_name=course_name,
            due=due,
            now=now,
        )
