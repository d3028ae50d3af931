"""
Scheduler Orchestrator

Owns the one AsyncIOScheduler the process runs. Workflows never touch
APScheduler directly; they register through here so start/stop and status
reporting stay in one place.
"""
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class SchedulerOrchestrator:
    """Thin lifecycle wrapper around the shared AsyncIOScheduler."""

    def __init__(self, timezone: str = "UTC"):
        self._scheduler = AsyncIOScheduler(timezone=timezone)
        self._timezone = timezone
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    async def start(self):
        """Start scheduler (idempotent). Must be called from the running event loop."""
        if self._is_running:
            logger.warning("Scheduler already running")
            return

        self._scheduler.start()
        self._is_running = True
        logger.info(f"Scheduler started with {len(self.get_all_jobs())} job(s)")

    async def stop(self, wait: bool = True):
        """Stop scheduler. With wait=True in-flight jobs finish first."""
        if not self._is_running:
            return

        self._scheduler.shutdown(wait=wait)
        self._is_running = False
        logger.info("Scheduler stopped")

    def add_job(
        self,
        func: Callable[[], Awaitable[Any]],
        trigger: BaseTrigger,
        job_id: str,
        name: str,
        **options: Any,
    ):
        """Register (or replace) a job under job_id."""
        options.setdefault("replace_existing", True)
        return self._scheduler.add_job(func, trigger=trigger, id=job_id, name=name, **options)

    def remove_job(self, job_id: str) -> bool:
        """Drop a job if registered. Returns whether one was removed."""
        if self._scheduler.get_job(job_id) is None:
            return False
        self._scheduler.remove_job(job_id)
        return True

    def get_job(self, job_id: str):
        return self._scheduler.get_job(job_id)

    def get_all_jobs(self) -> List:
        return self._scheduler.get_jobs()

    def get_status(self) -> Dict[str, Any]:
        """Running flag, timezone, and each job with its next fire time."""
        jobs = self.get_all_jobs()

        return {
            "running": self._is_running,
            "timezone": self._timezone,
            "total_jobs": len(jobs),
            "jobs": [
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run": next_run_isoformat(job),
                }
                for job in jobs
            ]
        }


def next_run_isoformat(job) -> Optional[str]:
    """Next fire time of a job; None for pending (not yet started) jobs."""
    next_run: Optional[datetime] = getattr(job, "next_run_time", None) if job else None
    return next_run.isoformat() if next_run else None


# Global singleton
_scheduler_orchestrator: Optional[SchedulerOrchestrator] = None


def get_scheduler_orchestrator() -> SchedulerOrchestrator:
    """Get or create scheduler orchestrator singleton."""
    global _scheduler_orchestrator
    if _scheduler_orchestrator is None:
        _scheduler_orchestrator = SchedulerOrchestrator()
    return _scheduler_orchestrator
