"""Vector store backends for memory persistence and similarity search."""

from functools import lru_cache

from app.core.config import settings
from app.domain.exceptions import VectorStoreError
from .base import (
    PointId,
    PointUpdate,
    RangeFilter,
    ScoredItem,
    ScrollPage,
    StoredPoint,
    VectorStore,
)
from .pgvector import PgVectorStore
from .qdrant import QdrantVectorStore


@lru_cache()
def get_vector_store() -> VectorStore:
    """Get configured vector store (singleton)."""
    backend = settings.VECTOR_STORE_BACKEND.lower()

    if backend == "qdrant":
        return QdrantVectorStore(
            collection_name=settings.QDRANT_COLLECTION,
            url=settings.QDRANT_URL,
            host=settings.QDRANT_HOST,
            port=settings.QDRANT_PORT,
            api_key=settings.QDRANT_API_KEY,
        )

    if backend == "pgvector":
        return PgVectorStore(database_url=settings.DATABASE_URL)

    raise VectorStoreError("configure", f"Unknown VECTOR_STORE_BACKEND: {settings.VECTOR_STORE_BACKEND}")


__all__ = [
    "PointId",
    "PointUpdate",
    "RangeFilter",
    "ScoredItem",
    "ScrollPage",
    "StoredPoint",
    "VectorStore",
    "PgVectorStore",
    "QdrantVectorStore",
    "get_vector_store",
]
