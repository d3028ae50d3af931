"""
Retrieval breadth tracking.

Holds the raw result count of the most recent search so the next ingestion
can derive its initial specificity. Process-local and not persisted: a
restart resets it to the default. Concurrent requests race on it with
last-write-wins semantics; the value is a heuristic signal only.
"""

from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_LAST_RETRIEVAL_COUNT = 50


class RetrievalState:
    """Mutable cell for the last retrieval's raw result count."""

    def __init__(self, initial: int = DEFAULT_LAST_RETRIEVAL_COUNT):
        self._last_retrieval_raw_count = initial

    def get_last_retrieval_count(self) -> int:
        return self._last_retrieval_raw_count

    def set_last_retrieval_count(self, count: Any) -> None:
        """Record a retrieval breadth. Invalid values are ignored."""
        if isinstance(count, bool) or not isinstance(count, (int, float)):
            logger.debug(f"Ignoring non-numeric retrieval count: {count!r}")
            return
        if count < 0 or count != count:
            logger.debug(f"Ignoring invalid retrieval count: {count!r}")
            return
        self._last_retrieval_raw_count = count

    def reset(self) -> None:
        self._last_retrieval_raw_count = DEFAULT_LAST_RETRIEVAL_COUNT


# Global singleton
_retrieval_state: Optional[RetrievalState] = None


def get_retrieval_state() -> RetrievalState:
    """Get or create the process-wide retrieval state (FastAPI dependency)."""
    global _retrieval_state
    if _retrieval_state is None:
        _retrieval_state = RetrievalState()
    return _retrieval_state
