# Data Transfer Objects (DTOs)
# Request/response models for API endpoints

from app.models.dto.memory import (
    MemoryCreate,
    MemoryIngestResponse,
    MemorySearchRequest,
    MemorySearchResult,
)

__all__ = [
    "MemoryCreate",
    "MemoryIngestResponse",
    "MemorySearchRequest",
    "MemorySearchResult",
]
