"""API dependencies.

Collaborators handed to route handlers. Tests swap them out via
app.dependency_overrides.
"""

from typing import Union

from app.domain.retrieval_state import RetrievalState, get_retrieval_state
from app.services.embeddings import EmbeddingProvider, get_embedding_provider
from app.services.vector_store import VectorStore, get_vector_store


def get_store() -> VectorStore:
    """Vector store for the configured collection."""
    return get_vector_store()


def get_embedder() -> EmbeddingProvider:
    """Configured embedding provider. Raises EmbeddingError when misconfigured."""
    return get_embedding_provider()


def get_state() -> RetrievalState:
    """Process-wide retrieval breadth state."""
    return get_retrieval_state()


def get_store_or_error() -> Union[VectorStore, Exception]:
    """Vector store, or the error raised while building it (health reporting)."""
    try:
        return get_store()
    except Exception as e:
        return e
