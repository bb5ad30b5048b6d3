"""Shared HTTP plumbing for learning-management-system adapters."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from zoneinfo import ZoneInfo

import requests

from studyflow.config import ConnectionConfig, ConnectionSettings
from studyflow.core.assignments import Assignment, AssignmentSource, ValidationError
from studyflow.core.normalize import (
    PriorityThresholds,
    determine_subject,
    format_due_time,
    infer_priority,
    subject_color,
)

logger = logging.getLogger(__name__)

# Failures that mean "no data from here", never an error for the caller.
FETCH_ERRORS = (
    requests.RequestException,
    ValidationError,
    ValueError,
    KeyError,
    TypeError,
    AttributeError,
)


class LMSAdapter(ABC):
    """
    Base class for LMS adapters.

    Handles bearer auth, timeouts, connection state and best-effort fetching.
    Subclasses supply the endpoints and how to read one work item. No
    business logic here beyond the shared normalization rules.
    """

    source: AssignmentSource
    thresholds: PriorityThresholds

    def __init__(
        self,
        connection: ConnectionConfig,
        settings: ConnectionSettings | None = None,
        timeout: float = 15.0,
        timezone: str = "America/Toronto",
        session: requests.Session | None = None,
    ):
        self.connection = connection
        self.settings = settings
        self.timeout = timeout
        self.tz = ZoneInfo(timezone)
        self._session = session or requests.Session()

    # ---- subclass hooks ----

    @abstractmethod
    def _probe_url(self) -> str:
        ...

    @abstractmethod
    def _can_probe(self) -> bool:
        ...

    @abstractmethod
    def _fetch_courses(self) -> list[tuple[str, str]]:
        """Active courses as (id, name) pairs."""

    @abstractmethod
    def _fetch_work_items(self, course_id: str) -> list[dict]:
        ...

    @abstractmethod
    def _parse_item(self, item: dict, course_name: str, now: datetime) -> Assignment | None:
        """Normalize one work item. None means skip it."""

    # ---- HTTP ----

    def _headers(self) -> dict:
        if self.connection.token.strip():
            return {"Authorization": f"Bearer {self.connection.token}"}
        return {}

    def _get(self, url: str, params: dict | None = None) -> requests.Response:
        logger.debug(f"GET {url} {params or ''}")
        return self._session.get(url, headers=self._headers(), params=params, timeout=self.timeout)

    def _get_json(self, url: str, params: dict | None = None) -> dict | list:
        """Authenticated GET; anything but 200 is a failure."""
        resp = self._get(url, params)
        if resp.status_code != 200:
            raise requests.HTTPError(f"{self.source.display_name} returned {resp.status_code} for {url}")
        return resp.json()

    # ---- connection state ----

    def _set_connected(self, connected: bool) -> None:
        self.connection.connected = connected
        if self.settings is not None:
            self.settings.save(self.connection)

    def test_connection(self) -> bool:
        """Probe the service; persist and return whether it answered 200."""
        if not self._can_probe():
            return False
        try:
            connected = self._get(self._probe_url()).status_code == 200
        except requests.RequestException as e:
            logger.warning(f"{self.source.display_name} connection test failed: {e}")
            connected = False
        self._set_connected(connected)
        return connected

    def disconnect(self) -> None:
        self.connection.token = ""
        self._set_connected(False)

    # ---- fetching ----

    def _build(
        self,
        title: str,
        description: str,
        course_name: str,
        due: datetime,
        now: datetime,
    ) -> Assignment:
        """
        Assignment with subject, colour and priority inferred.

        The due date is kept in the configured timezone so its calendar day
        matches due_time. Raises ValidationError for a missing title.
        """
        subject = determine_subject(course_name)
        assignment = Assignment(
            title=title,
            description=description,
            subject=subject,
            course_name=course_name,
            due_date=due.astimezone(self.tz),
            due_time=format_due_time(due, self.tz),
            priority=infer_priority(due, now, self.thresholds),
            completed=False,
            created_at=now,
            custom_color=subject_color(subject),
            source=self.source,
        )
        assignment.validate()
        return assignment

    def _fetch_course(self, course_id: str, course_name: str, now: datetime) -> list[Assignment]:
        try:
            items = self._fetch_work_items(course_id)
        except FETCH_ERRORS as e:
            logger.warning(f"Skipping {self.source.display_name} course {course_name!r}: {e}")
            return []

        assignments = []
        for item in items:
            try:
                assignment = self._parse_item(item, course_name, now)
            except FETCH_ERRORS as e:
                logger.warning(f"Skipping unreadable item in {course_name!r}: {e}")
                continue
            if assignment is not None:
                assignments.append(assignment)
        return assignments

    def fetch_assignments(self, as_of: datetime | None = None) -> list[Assignment]:
        """Fetch and normalize every dated work item from active courses."""
        if not self.connection.connected or not self._can_probe():
            return []

        now = as_of or datetime.now(self.tz)
        try:
            courses = self._fetch_courses()
        except FETCH_ERRORS as e:
            logger.warning(f"Could not fetch {self.source.display_name} courses: {e}")
            return []

        assignments = []
        for course_id, course_name in courses:
            assignments.extend(self._fetch_course(course_id, course_name, now))

        logger.info(f"Fetched {len(assignments)} assignments from {self.source.display_name}")
        return assignments
