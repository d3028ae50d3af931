"""Hosted embeddings via the OpenAI SDK."""

import logging

from openai import OpenAI, OpenAIError

from app.domain.exceptions import EmbeddingError
from .base import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "text-embedding-3-small"

# Output sizes of the hosted models (needed to create the collection)
_MODEL_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """
    OpenAI embeddings. SDK errors surface as EmbeddingError.

    Unknown model names fall back to 1536 dimensions.
    """

    def __init__(self, api_key: str, model: str | None = None):
        self.client = OpenAI(api_key=api_key)
        self._model = model or DEFAULT_OPENAI_MODEL
        self._dimension = _MODEL_DIMENSIONS.get(self._model, 1536)

    def _create(self, inputs) -> list:
        try:
            return self.client.embeddings.create(model=self._model, input=inputs).data
        except OpenAIError as e:
            logger.error(f"OpenAI embedding request failed ({self._model}): {e}")
            raise EmbeddingError(f"OpenAI embedding request failed: {e}") from e

    def embed_text(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text")
        return self._create(text)[0].embedding

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """One request for all non-blank texts; blank positions get []."""
        positions = [i for i, text in enumerate(texts) if text and text.strip()]
        results: list[list[float]] = [[] for _ in texts]
        if not positions:
            return results

        data = self._create([texts[i] for i in positions])
        for i, item in zip(positions, data):
            results[i] = item.embedding
        return results

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return self._model
