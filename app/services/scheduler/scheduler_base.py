"""
Scheduler Base Class

Shared plumbing for maintenance workflows: job registration on the
orchestrator, manual triggers, run bookkeeping and status.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, Optional
import logging

from apscheduler.triggers.base import BaseTrigger

from .scheduler_orchestrator import get_scheduler_orchestrator, next_run_isoformat

logger = logging.getLogger(__name__)


class SchedulerBase(ABC):
    """
    A workflow the orchestrator can run on a trigger.

    Subclasses provide workflow_name, build_trigger() and execute().
    Jobs run with max_instances=1 and coalesce=True: missed fires collapse
    into one run and APScheduler never starts a second concurrent copy.
    """

    def __init__(self):
        self._scheduler = get_scheduler_orchestrator()
        self._last_run: Optional[datetime] = None
        self._last_result: Optional[Dict[str, Any]] = None
        self._stats = {
            "total_runs": 0,
            "successful_runs": 0,
            "failed_runs": 0,
            "skipped_runs": 0,
            "items_scanned": 0,
            "items_deleted": 0,
        }

    @property
    @abstractmethod
    def workflow_name(self) -> str:
        pass

    @property
    def job_id(self) -> str:
        return f"{self.workflow_name}_job"

    @abstractmethod
    def build_trigger(self) -> BaseTrigger:
        pass

    @abstractmethod
    async def execute(self) -> Dict[str, Any]:
        """Run once. Result dict carries at least `success` and `skipped`."""
        pass

    async def register(self):
        trigger = self.build_trigger()
        self._scheduler.add_job(
            self.execute,
            trigger=trigger,
            job_id=self.job_id,
            name=self.workflow_name.replace('_', ' ').title(),
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Registered {self.workflow_name} job ({self.job_id}), trigger={trigger}")

    def unregister(self) -> bool:
        return self._scheduler.remove_job(self.job_id)

    async def trigger_manual(self) -> Dict[str, Any]:
        """Run now, outside the schedule (API endpoint)."""
        logger.info(f"Manual trigger: {self.workflow_name}")
        return await self.execute()

    def _record_run(self, started: datetime, outcome: Dict[str, Any]) -> None:
        self._last_run = started
        self._last_result = outcome
        self._stats["total_runs"] += 1
        self._stats["items_scanned"] += outcome.get("scanned", 0)
        self._stats["items_deleted"] += outcome.get("deleted", 0)
        key = "successful_runs" if outcome.get("success") else "failed_runs"
        self._stats[key] += 1

    def get_status(self) -> Dict[str, Any]:
        job = self._scheduler.get_job(self.job_id)

        return {
            "workflow": self.workflow_name,
            "registered": job is not None,
            "running": job is not None and self._scheduler.is_running,
            "last_run": self._last_run.isoformat() if self._last_run else None,
            "next_run": next_run_isoformat(job),
            "last_result": self._last_result,
            "stats": dict(self._stats),
        }
