"""
Trim score algorithm.

Ranks memories for eviction. The score grows with age and with time since
last access, and is dampened logarithmically by accumulated usage:

    score = (w_age × age + w_recency × recency) / ln(max(0.1, usage) + c_usage)

Higher = more evictable. Missing timestamps default to "now" so absent data
never inflates eviction priority; malformed payloads score +inf.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional
import logging
import math

logger = logging.getLogger(__name__)

# Unscoreable items younger than this are protected from eviction
MIN_UNSCOREABLE_AGE_SECONDS = 60

USAGE_FLOOR = 0.1


@dataclass
class TrimWeights:
    """Configurable weights for trim score components."""

    age: float = 1.0
    recency: float = 1.5
    usage_offset: float = 1.0


def as_finite_number(value: Any) -> Optional[float]:
    """Numeric payload field or None (bools, strings, NaN and inf count as missing)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def compute_trim_score(
    payload: Optional[Mapping[str, Any]],
    now: float,
    weights: Optional[TrimWeights] = None,
) -> float:
    """
    Compute eviction priority for a single memory payload.

    Args:
        payload: Stored memory payload (timestamp_created,
            timestamp_last_accessed, weighted_access_score)
        now: Reference time in epoch seconds
        weights: Weight configuration (default: TrimWeights())

    Returns:
        Non-negative score, or +inf for malformed/unscoreable payloads

    Examples (default weights):
        - {} → 0.0 (everything defaults to "just now")
        - 1 day old, never re-accessed, score 0.5 → ~(86400 + 129600) / ln(1.5)
    """
    if weights is None:
        weights = TrimWeights()

    if not isinstance(payload, Mapping):
        logger.warning("Invalid memory payload provided to trim scoring")
        return math.inf

    created = as_finite_number(payload.get("timestamp_created"))
    last_accessed = as_finite_number(payload.get("timestamp_last_accessed"))
    usage = as_finite_number(payload.get("weighted_access_score"))

    age = now - (created or now)
    recency = now - (last_accessed or created or now)

    usage_input = max(USAGE_FLOOR, usage or 0.0) + weights.usage_offset
    usage_factor = math.log(usage_input) if usage_input > 0 else -math.inf

    if usage_factor <= 0:
        # Reachable whenever usage_offset < 0.9, zero and negative included
        logger.warning(
            f"Invalid usage factor {usage_factor:.4f} for payload "
            f"(usage_offset={weights.usage_offset})"
        )
        return 0.0 if age < MIN_UNSCOREABLE_AGE_SECONDS else math.inf

    return (weights.age * age + weights.recency * recency) / usage_factor
