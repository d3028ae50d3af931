"""
Memory DTOs.

Request/response models for the ingestion and search endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any

from app.core.config import settings


class MemoryCreate(BaseModel):
    """Request body for memory ingestion."""

    content: str = Field(description="Memory text (embedded for similarity search)")
    memory_type: str = Field(description="Caller-defined category, e.g. 'chat' or 'event'")
    source_id: Optional[str] = Field(
        default=None, description="Optional origin identifier (user, channel, ...)"
    )

    model_config = {"json_schema_extra": {"examples": [
        {
            "content": "Viewer Ana said her cat is called Miso",
            "memory_type": "chat",
            "source_id": "ana_42",
        }
    ]}}


class MemoryIngestResponse(BaseModel):
    """Response for a successful ingestion."""

    id: str
    message: str = "Memory ingested successfully"
    initial_score: float


class MemorySearchRequest(BaseModel):
    """
    Request body for memory search.

    top_k bounds the raw similarity search; retrieve_n is how many of those
    are returned and boosted. retrieve_n > top_k is rejected by the domain
    layer (400) before any embedding or store call.
    """

    query: str = Field(description="Search text")
    top_k: int = Field(
        default_factory=lambda: settings.DEFAULT_TOP_K,
        ge=1,
        description="Raw search breadth",
    )
    retrieve_n: int = Field(
        default_factory=lambda: settings.DEFAULT_RETRIEVE_N,
        ge=1,
        description="Results returned (and score-boosted)",
    )


class MemorySearchResult(BaseModel):
    """Single selected search hit."""

    id: str
    score: float = Field(description="Similarity score from the vector store")
    payload: Dict[str, Any] = Field(default_factory=dict)
