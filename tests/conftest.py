"""
Pytest configuration and fixtures for testing.

Provides:
- In-memory vector store and deterministic embedder (no Qdrant / OpenAI)
- Fresh RetrievalState per test
- TestClient over an app without lifespan (no scheduler, no collection check)
"""
import pytest
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.deps import get_embedder, get_state, get_store, get_store_or_error
from app.api.errors import register_exception_handlers
from app.api.router import api_router
from app.core.config import settings
from app.domain.exceptions import EmbeddingError, VectorStoreError
from app.domain.retrieval_state import RetrievalState
from app.services.embeddings import EmbeddingProvider
from app.services.vector_store import (
    PointId,
    PointUpdate,
    RangeFilter,
    ScoredItem,
    ScrollPage,
    StoredPoint,
    VectorStore,
)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class InMemoryVectorStore(VectorStore):
    """
    Dict-backed VectorStore.

    search() returns points in insertion order with descending fake scores;
    scroll() pages in insertion order using the next point id as the offset
    (like Qdrant). Every call is recorded in `calls`.
    """

    def __init__(self):
        self.points: Dict[PointId, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.fail_on: set[str] = set()

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise VectorStoreError(name, "simulated failure")

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    @property
    def collection_name(self) -> str:
        return "test_memory"

    async def ensure_collection(self, dimension: int) -> bool:
        self._record("ensure_collection", dimension)
        return False

    async def upsert(self, point_id, vector, payload) -> None:
        self._record("upsert", point_id)
        self.points[point_id] = {"vector": vector, "payload": dict(payload)}

    async def search(self, vector, limit, with_payload=True) -> List[ScoredItem]:
        self._record("search", limit)
        items = []
        for rank, (point_id, point) in enumerate(list(self.points.items())[:limit]):
            items.append(
                ScoredItem(id=point_id, score=1.0 - rank * 0.01, payload=dict(point["payload"]))
            )
        return items

    async def scroll(
        self,
        offset=None,
        limit=100,
        with_payload=True,
        with_vector=False,
        scroll_filter: Optional[RangeFilter] = None,
    ) -> ScrollPage:
        self._record("scroll", offset, limit, scroll_filter)
        ids = list(self.points)
        if scroll_filter is not None:
            ids = [
                point_id for point_id in ids
                if self.points[point_id]["payload"].get(scroll_filter.key, float("inf"))
                < scroll_filter.lt
            ]
        # Offsets are point ids, so deletes between pages never shift the cursor
        if offset is not None and offset not in ids:
            # Cursor row vanished: end the scan rather than restart it
            return ScrollPage(points=[], next_page_offset=None)
        start = ids.index(offset) if offset is not None else 0
        page_ids = ids[start:start + limit]
        next_offset = ids[start + limit] if start + limit < len(ids) else None
        return ScrollPage(
            points=[StoredPoint(id=i, payload=dict(self.points[i]["payload"])) for i in page_ids],
            next_page_offset=next_offset,
        )

    async def set_payload_batch(self, updates: List[PointUpdate], wait: bool = False) -> None:
        self._record("set_payload", [u.id for u in updates])
        for update in updates:
            if update.id in self.points:
                self.points[update.id]["payload"].update(update.payload)

    async def delete(self, point_ids) -> None:
        self._record("delete", list(point_ids))
        for point_id in point_ids:
            self.points.pop(point_id, None)

    async def ping(self) -> None:
        self._record("ping")


class FakeEmbedder(EmbeddingProvider):
    """Deterministic 4-dim embedder; records every text it embeds."""

    def __init__(self):
        self.texts: List[str] = []
        self.fail = False

    def embed_text(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text")
        if self.fail:
            raise EmbeddingError("Embedding generation failed.")
        self.texts.append(text)
        return [float(len(text)), 0.0, 1.0, 0.5]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_text(t) if t and t.strip() else [] for t in texts]

    @property
    def dimension(self) -> int:
        return 4

    @property
    def model_name(self) -> str:
        return "fake-embedder"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def retrieval_state() -> RetrievalState:
    return RetrievalState()


@asynccontextmanager
async def test_lifespan(app: FastAPI):
    """Minimal lifespan that skips scheduler registration."""
    yield


def create_test_app() -> FastAPI:
    """Create FastAPI app for testing without scheduler overhead.

    Registers domain exception handlers to match production behavior (main.py).
    """
    app = FastAPI(title="Memory Manager Test API", lifespan=test_lifespan)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


@pytest.fixture
def client(store, embedder, retrieval_state):
    """TestClient wired to the in-memory fakes."""
    app = create_test_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_store_or_error] = lambda: store
    app.dependency_overrides[get_embedder] = lambda: embedder
    app.dependency_overrides[get_state] = lambda: retrieval_state

    with TestClient(app) as test_client:
        yield test_client
