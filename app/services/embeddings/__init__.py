"""Embedding services for semantic vector generation."""

from functools import lru_cache

from app.core.config import settings
from app.domain.exceptions import EmbeddingError
from .base import EmbeddingProvider
from .openai import OpenAIEmbeddingProvider


@lru_cache()
def get_embedding_provider() -> EmbeddingProvider:
    """Get configured embedding provider (singleton)."""
    provider = settings.EMBEDDING_PROVIDER.lower()

    if provider == "openai":
        if not settings.OPENAI_API_KEY:
            raise EmbeddingError("OPENAI_API_KEY is required for embedding generation")
        return OpenAIEmbeddingProvider(
            api_key=settings.OPENAI_API_KEY, model=settings.EMBEDDING_MODEL_NAME
        )

    if provider == "local":
        from .local import LocalEmbeddingProvider

        return LocalEmbeddingProvider(model=settings.EMBEDDING_MODEL_NAME)

    raise EmbeddingError(f"Unknown EMBEDDING_PROVIDER: {settings.EMBEDDING_PROVIDER}")


__all__ = ["EmbeddingProvider", "get_embedding_provider"]
