"""Local sentence-transformers embedding provider (no network calls)."""

import logging

from app.domain.exceptions import EmbeddingError
from .base import EmbeddingProvider

logger = logging.getLogger(__name__)


class LocalEmbeddingProvider(EmbeddingProvider):
    """
    all-MiniLM-L6-v2 (384 dims) via sentence-transformers.

    Mean-pooled, L2-normalized vectors. Requires the `local` extra.
    """

    def __init__(self, model: str | None = None):
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as e:
            raise EmbeddingError(
                "sentence-transformers is not installed (install the 'local' extra)"
            ) from e

        self._model = model or "sentence-transformers/all-MiniLM-L6-v2"
        logger.info(f"Loading embedding model: {self._model}")
        try:
            self.encoder = SentenceTransformer(self._model)
        except Exception as e:
            raise EmbeddingError(f"Embedding model unavailable: {e}") from e
        self._dimension = self.encoder.get_sentence_embedding_dimension()
        logger.info(f"Embedding model loaded (dim={self._dimension})")

    def embed_text(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text")

        try:
            vector = self.encoder.encode(text, normalize_embeddings=True)
        except Exception as e:
            raise EmbeddingError(f"Embedding generation failed: {e}") from e
        return vector.tolist()

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        valid_indices = [i for i, text in enumerate(texts) if text and text.strip()]
        results: list[list[float]] = [[] for _ in texts]
        if not valid_indices:
            return results

        try:
            vectors = self.encoder.encode(
                [texts[i] for i in valid_indices], normalize_embeddings=True
            )
        except Exception as e:
            raise EmbeddingError(f"Embedding generation failed: {e}") from e

        for idx, vector in zip(valid_indices, vectors):
            results[idx] = vector.tolist()
        return results

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return self._model
