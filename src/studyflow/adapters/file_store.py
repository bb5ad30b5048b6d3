"""File-based assignment store adapter."""

import json
import logging
from pathlib import Path

from studyflow.core.assignments import Assignment

from .memory_store import InMemoryAssignmentStore

logger = logging.getLogger(__name__)


class FileAssignmentStore(InMemoryAssignmentStore):
    """
    Assignment store persisted to a JSON file.

    Implements AssignmentStore protocol. The whole collection is loaded on
    start and rewritten after every mutation.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        super().__init__(self._load())

    def _load(self) -> list[Assignment]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Could not read {self.path}, starting empty: {e}")
            return []
        if not isinstance(data, dict):
            logger.warning(f"Unexpected layout in {self.path}, starting empty")
            return []

        assignments = []
        for item in data.get("assignments", []):
            try:
                assignments.append(Assignment.from_dict(item))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping unreadable assignment in {self.path}: {e}")
        return assignments

    def _commit(self) -> None:
        records = sorted(self._records.values(), key=lambda a: a.id)
        payload = {"assignments": [a.to_dict() for a in records]}

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2))
        tmp.replace(self.path)
