"""
Trimming Workflow Scheduler

Runs the memory trimming pass on a cron schedule (TRIM_SCHEDULE, default
4 AM daily) and on manual (API) triggers.

A trimming run that is requested while another is still in flight is
skipped rather than queued; the next scheduled run picks up where the
store stands.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Optional
import logging

from apscheduler.triggers.cron import CronTrigger

from app.core.config import settings
from app.services.trimming import TrimmingService
from app.services.vector_store import get_vector_store
from ..scheduler_base import SchedulerBase

logger = logging.getLogger(__name__)


def _default_service_factory() -> TrimmingService:
    return TrimmingService(get_vector_store())


class TrimmingScheduler(SchedulerBase):
    """
    Trimming workflow scheduler.

    The service is built per run so configuration and store handles are
    never cached between passes.
    """

    def __init__(
        self,
        service_factory: Optional[Callable[[], TrimmingService]] = None,
        schedule: Optional[str] = None,
    ):
        super().__init__()
        self._service_factory = service_factory or _default_service_factory
        self._schedule = schedule or settings.TRIM_SCHEDULE
        self._running = False
        self._lock = asyncio.Lock()

    @property
    def workflow_name(self) -> str:
        return "trimming"

    @property
    def schedule(self) -> str:
        return self._schedule

    @property
    def is_running(self) -> bool:
        return self._running

    def build_trigger(self) -> CronTrigger:
        return CronTrigger.from_crontab(self._schedule)

    async def execute(self) -> dict[str, Any]:
        """
        Run one trimming pass (scheduled job or manual trigger).

        Returns:
            TrimResult fields plus `skipped`; skipped runs carry a reason.
        """
        # Concurrency guard: skip if a pass is already in flight
        async with self._lock:
            if self._running:
                logger.info("Trimming already running, skipping")
                self._stats["skipped_runs"] += 1
                return {"success": True, "skipped": True, "reason": "already_running"}
            self._running = True

        run_start = datetime.now(timezone.utc)
        logger.info(f"[{run_start.isoformat()}] Running memory trimming...")

        try:
            service = self._service_factory()
            result = await service.run_trimming()
            outcome = {"skipped": False, **result.to_dict()}
        except Exception as e:
            # Service construction failed (e.g. bad store config)
            logger.error(f"Trimming could not start: {e}", exc_info=True)
            outcome = {
                "success": False,
                "skipped": False,
                "scanned": 0,
                "deleted": 0,
                "error": str(e),
            }
        finally:
            async with self._lock:
                self._running = False

        self._record_run(run_start, outcome)
        return outcome

    def get_status(self) -> dict[str, Any]:
        status = super().get_status()
        status["schedule"] = self._schedule
        status["in_progress"] = self._running
        return status


# Singleton instance
_trimming_scheduler: TrimmingScheduler | None = None


def get_trimming_scheduler() -> TrimmingScheduler:
    """Get or create trimming scheduler singleton."""
    global _trimming_scheduler
    if _trimming_scheduler is None:
        _trimming_scheduler = TrimmingScheduler()
    return _trimming_scheduler
