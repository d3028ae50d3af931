"""
Memory API Routes

Ingestion and search endpoints.
All routes are thin HTTP adapters - business logic in MemoryOperations.

Pattern: Async routes + async domain operations (vector store I/O).
"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends

from app.api.deps import get_embedder, get_state, get_store
from app.domain.memory_operations import MemoryOperations
from app.domain.retrieval_state import RetrievalState
from app.models.dto.memory import (
    MemoryCreate,
    MemoryIngestResponse,
    MemorySearchRequest,
    MemorySearchResult,
)
from app.services.embeddings import EmbeddingProvider
from app.services.vector_store import VectorStore


router = APIRouter(prefix="/memory", tags=["memory"])


@router.post("", response_model=MemoryIngestResponse, status_code=201)
async def ingest_memory(
    data: MemoryCreate,
    store: VectorStore = Depends(get_store),
    embedder: EmbeddingProvider = Depends(get_embedder),
    state: RetrievalState = Depends(get_state),
) -> MemoryIngestResponse:
    """
    Ingest a new memory.

    Initial weighted_access_score is derived from the breadth of the most
    recent search (narrow recent searches → higher starting score).

    Raises:
        400: Blank content / memory_type
        500: Embedding or vector store failure
    """
    memory_id, initial_score = await MemoryOperations.ingest(store, embedder, state, data)
    return MemoryIngestResponse(id=memory_id, initial_score=initial_score)


@router.post("/search", response_model=List[MemorySearchResult])
async def search_memories(
    request: MemorySearchRequest,
    background_tasks: BackgroundTasks,
    store: VectorStore = Depends(get_store),
    embedder: EmbeddingProvider = Depends(get_embedder),
    state: RetrievalState = Depends(get_state),
) -> List[MemorySearchResult]:
    """
    Search memories and boost the ones returned.

    Searches top_k candidates, returns the first retrieve_n. Their scores
    and last-accessed timestamps are written back in the background after
    the response is sent; a failed write-back is logged, never returned.

    Raises:
        400: Blank query, or retrieve_n > top_k (checked before any store access)
        500: Embedding or vector store failure
    """
    outcome = await MemoryOperations.search(store, embedder, state, request)

    if outcome.update is not None:
        background_tasks.add_task(
            MemoryOperations.apply_retrieval_update, store, outcome.update
        )

    return [
        MemorySearchResult(id=str(item.id), score=item.score, payload=item.payload)
        for item in outcome.results
    ]
