"""Background auto-sync."""

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .sync import SyncOrchestrator

logger = logging.getLogger(__name__)

JOB_ID = "studyflow-auto-sync"


class AutoSyncScheduler:
    """Runs the startup sync once, then refreshes on an interval."""

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        interval_minutes: int = 60,
        scheduler: BackgroundScheduler | None = None,
    ):
        self.orchestrator = orchestrator
        self.interval_minutes = interval_minutes
        self.scheduler = scheduler or BackgroundScheduler()

    def _refresh(self) -> None:
        result = self.orchestrator.refresh()
        if not result.ok:
            logger.warning("Scheduled sync finished with errors")

    def start(self) -> None:
        self.orchestrator.initialize()

        if self.interval_minutes <= 0:
            logger.info("Auto-sync interval is 0, not scheduling")
            return

        self.scheduler.add_job(
            self._refresh,
            IntervalTrigger(minutes=self.interval_minutes),
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info(f"Auto-sync every {self.interval_minutes} minutes")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
