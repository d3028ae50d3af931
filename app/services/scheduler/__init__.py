"""
Scheduler Module

Scheduler infrastructure for background maintenance workflows.
"""
from .scheduler_orchestrator import get_scheduler_orchestrator, SchedulerOrchestrator
from .scheduler_base import SchedulerBase
from .workflows.trimming_scheduler import (
    get_trimming_scheduler,
    TrimmingScheduler,
)

__all__ = [
    "get_scheduler_orchestrator",
    "SchedulerOrchestrator",
    "SchedulerBase",
    "get_trimming_scheduler",
    "TrimmingScheduler",
]
