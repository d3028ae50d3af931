"""Domain-layer exceptions.

These replace HTTPException in domain code, keeping the domain layer
free of HTTP awareness. Global exception handlers in main.py map
these to the appropriate HTTP status codes.
"""


class DomainValidationError(Exception):
    """Missing or invalid request field. Maps to HTTP 400."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class UpstreamError(Exception):
    """External collaborator (embeddings, vector store) failed. Maps to HTTP 500."""

    category = "upstream_error"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class EmbeddingError(UpstreamError):
    """Embedding generation failed (empty text or model unavailable)."""

    category = "embedding_error"


class VectorStoreError(UpstreamError):
    """Vector store call failed."""

    category = "vector_store_error"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {detail}")


class TrimRunError(Exception):
    """Scan or delete failure inside a trimming run.

    Raised and caught inside TrimmingService.run_trimming; never reaches
    a caller.
    """

    def __init__(self, stage: str, cause: Exception):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed: {cause}")
