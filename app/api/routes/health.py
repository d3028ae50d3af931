"""Liveness and readiness probes."""

from datetime import datetime, timezone
from typing import Any, Dict, Union

from fastapi import APIRouter, Depends

from app.api.deps import get_state, get_store_or_error
from app.domain.retrieval_state import RetrievalState
from app.services.embeddings import get_embedding_provider
from app.services.vector_store import VectorStore

router = APIRouter()


def _embedding_check() -> str:
    """Provider construction only; no embedding request is made."""
    try:
        return f"configured: {get_embedding_provider().model_name}"
    except Exception as e:
        return f"error: {e}"


@router.get("/health")
async def health_check(
    store: Union[VectorStore, Exception] = Depends(get_store_or_error),
    state: RetrievalState = Depends(get_state),
) -> Dict[str, Any]:
    """
    Readiness check.

    Pings the vector store and reports embedding configuration. Any failing
    check, a store that cannot be built included, marks the service
    "degraded" (still HTTP 200).
    """
    collection = None
    if isinstance(store, Exception):
        store_status = f"error: {store}"
    else:
        collection = store.collection_name
        try:
            await store.ping()
            store_status = "connected"
        except Exception as e:
            store_status = f"error: {e}"

    embedding_status = _embedding_check()
    healthy = store_status == "connected" and not embedding_status.startswith("error")

    return {
        "status": "healthy" if healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "vector_store": store_status,
            "collection": collection,
            "embeddings": embedding_status,
        },
        "last_retrieval_count": state.get_last_retrieval_count(),
    }


@router.get("/healthz")
async def healthz():
    """Liveness probe; touches nothing external."""
    return {"status": "healthy"}
