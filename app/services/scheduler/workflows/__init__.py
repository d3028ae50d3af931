"""
Workflow Implementations

Specific workflow schedulers (memory trimming).
"""
from .trimming_scheduler import (
    get_trimming_scheduler,
    TrimmingScheduler,
)

__all__ = [
    "get_trimming_scheduler",
    "TrimmingScheduler",
]
