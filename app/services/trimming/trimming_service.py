"""
Trimming Service - Paginated Scan-and-Delete

Walks the whole collection page by page, scores every memory with the trim
score, and deletes the ones above threshold:
- `now` is fixed once per run so all scores share one clock
- Optional minimum age filter keeps young memories out of the scan
- One batch delete per page (that page's ids only), so each page commits
  independently and an interrupted run is safe to repeat
- Scan/score/delete errors abort the run and are logged; nothing propagates
"""

from dataclasses import dataclass, asdict, field
from typing import Any, List, Optional
import logging
import time

from app.algos.mem_scoring import TrimWeights, compute_trim_score
from app.core.config import settings
from app.domain.exceptions import TrimRunError
from app.services.vector_store import PointId, RangeFilter, ScrollPage, StoredPoint, VectorStore

logger = logging.getLogger(__name__)


@dataclass
class TrimConfig:
    """Configuration for a trimming run."""

    threshold: float = 500000.0
    """Trim score above which a memory is deleted."""

    batch_size: int = 100
    """Scroll page size (also bounds each delete call)."""

    min_age_seconds: Optional[int] = None
    """Only memories created more than this many seconds ago are scanned."""

    weights: TrimWeights = field(default_factory=TrimWeights)

    @classmethod
    def from_settings(cls) -> "TrimConfig":
        return cls(
            threshold=settings.TRIM_THRESHOLD,
            batch_size=settings.TRIM_BATCH_SIZE,
            min_age_seconds=settings.MIN_AGE_BEFORE_TRIM_SECONDS,
            weights=TrimWeights(
                age=settings.W_AGE,
                recency=settings.W_RECENCY,
                usage_offset=settings.C_USAGE,
            ),
        )


@dataclass
class TrimResult:
    """Outcome of one trimming run."""

    scanned: int = 0
    deleted: int = 0
    pages: int = 0
    success: bool = True
    error: Optional[str] = None
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class TrimmingService:
    """
    Runs trimming passes against a vector store.

    Holds no lock over the store: concurrent ingestion/retrieval may race
    with in-flight deletes.
    """

    def __init__(self, store: VectorStore, config: Optional[TrimConfig] = None):
        self.store = store
        self.config = config or TrimConfig.from_settings()

    def _build_filter(self, now: float) -> Optional[RangeFilter]:
        min_age = self.config.min_age_seconds
        if min_age is None or min_age <= 0:
            return None

        logger.info(f"Trimming filter: only considering memories older than {min_age} seconds")
        return RangeFilter(key="timestamp_created", lt=now - min_age)

    async def _fetch_page(
        self, offset: Optional[PointId], scroll_filter: Optional[RangeFilter]
    ) -> ScrollPage:
        try:
            return await self.store.scroll(
                offset=offset,
                limit=self.config.batch_size,
                with_payload=True,
                with_vector=False,
                scroll_filter=scroll_filter,
            )
        except Exception as e:
            raise TrimRunError("scroll", e) from e

    def _select_for_deletion(self, points: List[StoredPoint], now: float) -> List[PointId]:
        """Ids on this page scoring above threshold. Payload-less points are left alone."""
        ids = []
        for point in points:
            if not point.payload:
                continue

            try:
                score = compute_trim_score(point.payload, now, self.config.weights)
            except Exception as e:
                raise TrimRunError("score", e) from e
            if score > self.config.threshold:
                ids.append(point.id)
        return ids

    async def _delete_batch(self, ids: List[PointId]) -> None:
        logger.info(f"Attempting to delete {len(ids)} memories...")
        try:
            await self.store.delete(list(ids))
        except Exception as e:
            raise TrimRunError("delete", e) from e

    async def run_trimming(self) -> TrimResult:
        """
        Execute one full trimming pass.

        Returns:
            TrimResult with scanned/deleted totals. On failure success=False
            and error holds the message; the exception itself is not raised.
        """
        logger.info(f"Starting memory trimming. Threshold: {self.config.threshold}")
        started = time.monotonic()
        now = time.time()
        result = TrimResult()

        scroll_filter = self._build_filter(now)
        offset: Optional[PointId] = None

        try:
            while True:
                page = await self._fetch_page(offset, scroll_filter)
                result.pages += 1
                result.scanned += len(page.points)

                ids_to_delete = self._select_for_deletion(page.points, now)
                if ids_to_delete:
                    await self._delete_batch(ids_to_delete)
                    result.deleted += len(ids_to_delete)
                    logger.info(
                        f"Deleted {len(ids_to_delete)} memories. "
                        f"Total deleted so far: {result.deleted}"
                    )

                offset = page.next_page_offset
                if offset is None:
                    break
        except TrimRunError as e:
            result.success = False
            result.error = str(e)
            logger.error(f"Error during memory trimming: {e}", exc_info=True)
        finally:
            result.duration_seconds = time.monotonic() - started
            logger.info(
                f"Memory trimming {'finished' if result.success else 'aborted'}. "
                f"Scanned: {result.scanned}, Deleted: {result.deleted}."
            )

        return result
