"""
Memory Operations - Domain Logic Layer

Ingestion and retrieval over the vector store, plus the pure payload
computations they share with tests.
Follows static method pattern: no instance state, collaborators passed as
parameters (vector store, embedding provider, retrieval state).

Pattern: Async operations; every vector store / embedding call is an await
point, scoring itself is synchronous.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
import logging
import time
import uuid

from app.algos.mem_scoring import (
    as_finite_number,
    compute_access_specificity,
    compute_initial_specificity,
)
from app.core.config import settings
from app.domain.exceptions import DomainValidationError
from app.domain.retrieval_state import RetrievalState
from app.models.dto.memory import MemoryCreate, MemorySearchRequest
from app.services.embeddings import EmbeddingProvider
from app.services.vector_store import PointUpdate, ScoredItem, VectorStore

logger = logging.getLogger(__name__)


@dataclass
class RetrievalUpdate:
    """Score/timestamp write-back for the items a search selected."""

    specificity: float
    updates: List[PointUpdate] = field(default_factory=list)


@dataclass
class SearchOutcome:
    """Result of a search: selected hits plus the pending write-back."""

    results: List[ScoredItem]
    raw_count: int
    update: Optional[RetrievalUpdate] = None


# ═══════════════════════════════════════════════════════════════════
# Pure payload computations
# ═══════════════════════════════════════════════════════════════════

def compute_ingestion_payload(
    content: str,
    last_k: float,
    now: float,
    memory_type: str,
    source_id: Optional[str] = None,
    k_max: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the stored payload for a new memory.

    Initial score is the specificity of the last retrieval's breadth; both
    timestamps start at `now`. source_id is omitted when not provided.
    """
    initial_score = compute_initial_specificity(
        last_k, k_max if k_max is not None else settings.K_MAX
    )
    payload: Dict[str, Any] = {
        "content": content,
        "memory_type": memory_type,
        "timestamp_created": now,
        "timestamp_last_accessed": now,
        "weighted_access_score": initial_score,
    }
    if source_id:
        payload["source_id"] = source_id
    return payload


def compute_retrieval_update(
    selected_items: Sequence[ScoredItem],
    k: int,
    now: float,
    k_max: Optional[int] = None,
) -> RetrievalUpdate:
    """
    Compute per-item score boosts for a retrieval of breadth k.

    Every selected item gains access_specificity(k) on top of its own prior
    weighted_access_score (missing or non-finite prior counts as 0) and is stamped as
    accessed at `now`.
    """
    specificity = compute_access_specificity(
        k, k_max if k_max is not None else settings.K_MAX
    )

    updates = []
    for item in selected_items:
        prior = as_finite_number((item.payload or {}).get("weighted_access_score")) or 0.0
        updates.append(
            PointUpdate(
                id=item.id,
                payload={
                    "weighted_access_score": prior + specificity,
                    "timestamp_last_accessed": now,
                },
            )
        )

    return RetrievalUpdate(specificity=specificity, updates=updates)


class MemoryOperations:
    """
    Domain operations for stored memories.

    Pattern: Static methods, async I/O, no caching across calls.
    Validation happens before any embedding or store access.
    """

    # ═══════════════════════════════════════════════════════════════════
    # Ingestion
    # ═══════════════════════════════════════════════════════════════════

    @staticmethod
    async def ingest(
        store: VectorStore,
        embedder: EmbeddingProvider,
        state: RetrievalState,
        data: MemoryCreate,
    ) -> tuple[str, float]:
        """
        Embed and store a new memory. Returns (id, initial_score).

        Raises:
            DomainValidationError: content or memory_type blank
            EmbeddingError / VectorStoreError: upstream failure
        """
        if not data.content or not data.content.strip() or not data.memory_type:
            raise DomainValidationError("Missing required fields: content, memory_type")

        embedding = await embedder.aembed_text(data.content)

        now = time.time()
        payload = compute_ingestion_payload(
            content=data.content,
            last_k=state.get_last_retrieval_count(),
            now=now,
            memory_type=data.memory_type,
            source_id=data.source_id,
        )
        memory_id = str(uuid.uuid4())

        await store.upsert(memory_id, embedding, payload)

        initial_score = payload["weighted_access_score"]
        logger.info(
            f"Ingested memory: {memory_id} (Type: {data.memory_type}, "
            f"Initial Score: {initial_score:.2f})"
        )
        return memory_id, initial_score

    # ═══════════════════════════════════════════════════════════════════
    # Retrieval
    # ═══════════════════════════════════════════════════════════════════

    @staticmethod
    async def search(
        store: VectorStore,
        embedder: EmbeddingProvider,
        state: RetrievalState,
        request: MemorySearchRequest,
    ) -> SearchOutcome:
        """
        Similarity search that records breadth and prepares score boosts.

        The returned update is NOT applied here; callers hand it to
        apply_retrieval_update() off the response path.

        Raises:
            DomainValidationError: blank query or retrieve_n > top_k
            EmbeddingError / VectorStoreError: upstream failure
        """
        if not request.query or not request.query.strip():
            raise DomainValidationError("Missing required field: query")
        if request.top_k < 1 or request.retrieve_n < 1:
            raise DomainValidationError("top_k and retrieve_n must be positive")
        if request.retrieve_n > request.top_k:
            raise DomainValidationError("retrieve_n cannot be greater than top_k")

        query_embedding = await embedder.aembed_text(request.query)

        search_results = await store.search(
            query_embedding, limit=request.top_k, with_payload=True
        )

        k = len(search_results)
        state.set_last_retrieval_count(k)

        selected = search_results[: request.retrieve_n]
        if not selected:
            logger.info(f"Search returned 0 results for query: \"{request.query[:50]}...\"")
            return SearchOutcome(results=[], raw_count=0)

        update = compute_retrieval_update(selected, k, time.time())
        logger.info(
            f"Search returned {k} raw results. Updating {len(selected)} memories "
            f"with specificity {update.specificity:.2f}."
        )
        return SearchOutcome(results=selected, raw_count=k, update=update)

    @staticmethod
    async def apply_retrieval_update(store: VectorStore, update: RetrievalUpdate) -> None:
        """
        Write back score boosts (fire-and-forget).

        Designed to run as a background task: failures are logged and never
        raised, so a lost write only costs that access's boost.
        """
        try:
            await store.set_payload_batch(update.updates, wait=False)
            logger.debug(f"Applied retrieval update to {len(update.updates)} memories")
        except Exception as e:
            logger.error(
                f"Error updating retrieved memory scores/timestamps: {e}",
                exc_info=True,
            )
