"""Sync orchestration - pulls connected sources into the assignment store."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime

import requests

from .adapters.canvas import CanvasAdapter
from .adapters.google_classroom import GoogleClassroomAdapter
from .config import Config, ConnectionSettings
from .core.assignments import Assignment, AssignmentSource as SourceKind
from .ports.assignment_source import AssignmentSource
from .ports.assignment_store import AssignmentStore

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one or more sync passes."""

    ok: bool = True
    inserted: int = 0
    skipped: int = 0
    busy: bool = False
    sources: list[str] = field(default_factory=list)

    def merge(self, other: "SyncResult") -> None:
        self.ok = self.ok and other.ok
        self.inserted += other.inserted
        self.skipped += other.skipped
        self.busy = self.busy or other.busy
        self.sources.extend(other.sources)


def create_sources(
    config: Config,
    settings: ConnectionSettings,
    session: requests.Session | None = None,
) -> list[AssignmentSource]:
    """Build one adapter per supported LMS from stored settings."""
    common = dict(settings=settings, timeout=config.http_timeout, timezone=config.timezone, session=session)
    return [
        CanvasAdapter(settings.load(SourceKind.CANVAS.name), **common),
        GoogleClassroomAdapter(settings.load(SourceKind.GOOGLE_CLASSROOM.name), **common),
    ]


class SyncOrchestrator:
    """
    Coordinates fetching from connected sources into the store.

    Dedup policy: a synced record is identified by (source, course, title).
    An incoming item whose key is already stored is skipped, whether or not
    the stored copy is completed. Manual records never match.

    Passes are serialized per source: a trigger arriving while that source
    is mid-pass returns busy instead of fetching again.
    """

    def __init__(
        self,
        store: AssignmentStore,
        sources: list[AssignmentSource],
        settings: ConnectionSettings | None = None,
    ):
        self.store = store
        self.sources = {s.source: s for s in sources}
        self.settings = settings
        self._locks = {kind: threading.Lock() for kind in self.sources}
        self.last_result: SyncResult | None = None

    def auto_sync_sources(self) -> list[AssignmentSource]:
        """Sources that are connected and have auto-sync on."""
        return [
            s for s in self.sources.values()
            if s.connection.connected and s.connection.auto_sync
        ]

    def _existing_keys(self) -> set[tuple[str, str, str]]:
        return {a.dedup_key for a in self.store.query(lambda a: not a.is_manual)}

    def _merge(self, fetched: list[Assignment], result: SyncResult) -> None:
        seen = self._existing_keys()
        for assignment in fetched:
            if assignment.dedup_key in seen:
                result.skipped += 1
                continue
            self.store.insert(assignment)
            seen.add(assignment.dedup_key)
            result.inserted += 1

    def _sync_source(self, adapter: AssignmentSource, as_of: datetime | None) -> SyncResult:
        name = adapter.source.display_name
        lock = self._locks[adapter.source]
        if not lock.acquire(blocking=False):
            logger.info(f"{name} sync already running, skipping this trigger")
            return SyncResult(busy=True, sources=[adapter.source.name])

        result = SyncResult(sources=[adapter.source.name])
        try:
            self._merge(adapter.fetch_assignments(as_of=as_of), result)
        except Exception:
            # Records inserted before the failure stay in the store.
            logger.exception(f"{name} sync failed after {result.inserted} inserts")
            result.ok = False
        finally:
            lock.release()

        logger.info(f"{name} sync: {result.inserted} new, {result.skipped} already stored")
        return result

    def sync(self, source: SourceKind | None = None, as_of: datetime | None = None) -> SyncResult:
        """
        Run a pass over one source, or over every auto-sync source.

        An explicitly named source is synced even with auto-sync off.
        """
        if source is not None:
            targets = [self.sources[source]]
        else:
            targets = self.auto_sync_sources()

        result = SyncResult()
        for adapter in targets:
            result.merge(self._sync_source(adapter, as_of))
        self.last_result = result
        return result

    def initialize(self, as_of: datetime | None = None) -> SyncResult | None:
        """Startup trigger: sync only if some source is connected with auto-sync."""
        if not self.auto_sync_sources():
            return None
        return self.sync(as_of=as_of)

    def refresh(self, as_of: datetime | None = None) -> SyncResult:
        """Explicit user refresh."""
        return self.sync(as_of=as_of)

    def connect(
        self,
        source: SourceKind,
        token: str,
        base_url: str | None = None,
        as_of: datetime | None = None,
    ) -> bool:
        """Store new credentials, test them, and sync right away on success."""
        adapter = self.sources[source]
        adapter.connection.token = token
        if base_url is not None:
            adapter.connection.base_url = base_url
        if self.settings is not None:
            self.settings.save(adapter.connection)

        if not adapter.test_connection():
            logger.warning(f"Could not connect to {source.display_name}")
            return False

        self.sync(source, as_of=as_of)
        return True

    def disconnect(self, source: SourceKind) -> None:
        self.sources[source].disconnect()
