"""
Tests for the scheduler orchestrator and the trimming workflow.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from apscheduler.triggers.cron import CronTrigger

from app.services.scheduler import (
    get_scheduler_orchestrator,
    get_trimming_scheduler,
    SchedulerOrchestrator,
    TrimmingScheduler,
)
from app.services.trimming import TrimResult

import app.services.scheduler.scheduler_orchestrator as _orch_mod
import app.services.scheduler.workflows.trimming_scheduler as _trim_mod


def _reset_scheduler_singletons():
    """Tear down any running scheduler and clear both singletons."""
    orch = _orch_mod._scheduler_orchestrator
    if orch and orch._is_running:
        orch._scheduler.shutdown(wait=False)
        orch._is_running = False
    _orch_mod._scheduler_orchestrator = None
    _trim_mod._trimming_scheduler = None


@pytest.fixture(autouse=True)
def _isolate():
    _reset_scheduler_singletons()
    yield
    _reset_scheduler_singletons()


def _service_returning(result):
    service = MagicMock()
    service.run_trimming = AsyncMock(return_value=result)
    return service


class TestSchedulerOrchestrator:
    """Test suite for SchedulerOrchestrator."""

    def test_scheduler_orchestrator_instance(self):
        scheduler1 = get_scheduler_orchestrator()
        scheduler2 = get_scheduler_orchestrator()

        assert scheduler1 is scheduler2
        assert isinstance(scheduler1, SchedulerOrchestrator)

    def test_scheduler_initialization(self):
        status = get_scheduler_orchestrator().get_status()

        assert status["running"] is False
        assert status["total_jobs"] == 0

    @pytest.mark.asyncio
    async def test_scheduler_start_stop(self):
        scheduler = get_scheduler_orchestrator()

        await scheduler.start()
        assert scheduler.get_status()["running"] is True

        await scheduler.stop()
        assert scheduler.get_status()["running"] is False

    @pytest.mark.asyncio
    async def test_scheduler_double_start_ignored(self):
        scheduler = get_scheduler_orchestrator()

        await scheduler.start()
        await scheduler.start()
        assert scheduler.is_running is True

        await scheduler.stop()


class TestTrimmingWorkflow:
    """Test suite for TrimmingScheduler."""

    def test_trimming_scheduler_singleton(self):
        scheduler1 = get_trimming_scheduler()
        scheduler2 = get_trimming_scheduler()

        assert scheduler1 is scheduler2
        assert isinstance(scheduler1, TrimmingScheduler)

    def test_scheduler_properties(self):
        scheduler = TrimmingScheduler(schedule="0 4 * * *")

        assert scheduler.workflow_name == "trimming"
        assert scheduler.job_id == "trimming_job"
        assert isinstance(scheduler.build_trigger(), CronTrigger)

    def test_invalid_schedule_rejected(self):
        with pytest.raises(ValueError):
            TrimmingScheduler(schedule="every day at four").build_trigger()

    def test_initial_status(self):
        status = TrimmingScheduler(schedule="0 4 * * *").get_status()

        assert status["workflow"] == "trimming"
        assert status["registered"] is False
        assert status["schedule"] == "0 4 * * *"
        assert status["in_progress"] is False
        assert status["last_run"] is None
        assert status["stats"]["total_runs"] == 0

    @pytest.mark.asyncio
    async def test_register_adds_single_instance_job(self):
        scheduler = TrimmingScheduler(schedule="0 4 * * *")

        await scheduler.register()

        job = get_scheduler_orchestrator().get_job("trimming_job")
        assert job is not None
        assert job.max_instances == 1
        assert scheduler.get_status()["registered"] is True
        assert get_scheduler_orchestrator().get_status()["total_jobs"] == 1

    @pytest.mark.asyncio
    async def test_unregister(self):
        scheduler = TrimmingScheduler(schedule="0 4 * * *")
        await scheduler.register()

        assert scheduler.unregister() is True
        assert scheduler.unregister() is False
        assert scheduler.get_status()["registered"] is False

    @pytest.mark.asyncio
    async def test_execute_records_result(self):
        service = _service_returning(TrimResult(scanned=10, deleted=4, pages=1))
        scheduler = TrimmingScheduler(service_factory=lambda: service)

        outcome = await scheduler.execute()

        assert outcome["success"] is True
        assert outcome["skipped"] is False
        assert outcome["deleted"] == 4
        status = scheduler.get_status()
        assert status["last_run"] is not None
        assert status["last_result"] == outcome
        assert status["stats"]["successful_runs"] == 1
        assert status["stats"]["items_scanned"] == 10
        assert status["stats"]["items_deleted"] == 4

    @pytest.mark.asyncio
    async def test_failed_run_counted(self):
        service = _service_returning(TrimResult(success=False, error="scroll failed: boom"))
        scheduler = TrimmingScheduler(service_factory=lambda: service)

        outcome = await scheduler.execute()

        assert outcome["success"] is False
        assert scheduler.get_status()["stats"]["failed_runs"] == 1

    @pytest.mark.asyncio
    async def test_service_construction_failure_not_raised(self):
        def broken_factory():
            raise RuntimeError("no store configured")

        scheduler = TrimmingScheduler(service_factory=broken_factory)

        outcome = await scheduler.execute()

        assert outcome["success"] is False
        assert "no store configured" in outcome["error"]
        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_overlapping_run_skipped(self):
        release = asyncio.Event()
        started = asyncio.Event()

        async def slow_run():
            started.set()
            await release.wait()
            return TrimResult(scanned=1)

        service = MagicMock()
        service.run_trimming = slow_run
        scheduler = TrimmingScheduler(service_factory=lambda: service)

        first = asyncio.create_task(scheduler.execute())
        await started.wait()

        second = await scheduler.execute()
        assert second == {"success": True, "skipped": True, "reason": "already_running"}
        assert scheduler.get_status()["in_progress"] is True

        release.set()
        first_outcome = await first

        assert first_outcome["skipped"] is False
        stats = scheduler.get_status()["stats"]
        assert stats["total_runs"] == 1
        assert stats["skipped_runs"] == 1
        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_trigger_manual_runs_once(self):
        service = _service_returning(TrimResult())
        scheduler = TrimmingScheduler(service_factory=lambda: service)

        await scheduler.trigger_manual()

        service.run_trimming.assert_awaited_once()
