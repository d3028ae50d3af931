"""Abstract base class for vector store backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

PointId = Union[str, int]


@dataclass
class StoredPoint:
    """Point as returned by a scroll (payload may be missing)."""

    id: PointId
    payload: Optional[Dict[str, Any]] = None


@dataclass
class ScoredItem:
    """Search hit, ordered by descending similarity."""

    id: PointId
    score: float
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ScrollPage:
    """One page of a paginated scan. next_page_offset is None on the last page."""

    points: List[StoredPoint]
    next_page_offset: Optional[PointId] = None


@dataclass
class PointUpdate:
    """Payload fields to merge into a single point."""

    id: PointId
    payload: Dict[str, Any]


@dataclass
class RangeFilter:
    """Restrict a scroll to points whose numeric payload field is < lt."""

    key: str
    lt: float


class VectorStore(ABC):
    """Abstract base for vector store backends."""

    @abstractmethod
    async def ensure_collection(self, dimension: int) -> bool:
        """Create the collection if missing. Returns True when created."""
        pass

    @abstractmethod
    async def upsert(self, point_id: PointId, vector: List[float], payload: Dict[str, Any]) -> None:
        """Write or overwrite a single point."""
        pass

    @abstractmethod
    async def search(
        self, vector: List[float], limit: int, with_payload: bool = True
    ) -> List[ScoredItem]:
        """Similarity search, best match first."""
        pass

    @abstractmethod
    async def scroll(
        self,
        offset: Optional[PointId],
        limit: int,
        with_payload: bool = True,
        with_vector: bool = False,
        scroll_filter: Optional[RangeFilter] = None,
    ) -> ScrollPage:
        """Fetch the page starting at offset (None = first page)."""
        pass

    @abstractmethod
    async def set_payload_batch(self, updates: List[PointUpdate], wait: bool = False) -> None:
        """Merge per-point payloads in one round trip."""
        pass

    @abstractmethod
    async def delete(self, point_ids: List[PointId]) -> None:
        """Batch delete by id."""
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Raise if the backend is unreachable."""
        pass

    @property
    @abstractmethod
    def collection_name(self) -> str:
        pass
