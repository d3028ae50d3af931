"""
Trimming Module

Scheduled eviction of low-value memories.

Usage:
    service = TrimmingService(get_vector_store())
    result = await service.run_trimming()
"""

from app.services.trimming.trimming_service import TrimConfig, TrimResult, TrimmingService

__all__ = ["TrimConfig", "TrimResult", "TrimmingService"]
