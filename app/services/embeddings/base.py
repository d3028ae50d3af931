"""Abstract base class for embedding providers."""

import asyncio
from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """
    Abstract base for embedding providers.

    Providers are synchronous (SDK / model calls); request handlers use
    aembed_text() so the event loop is never blocked.
    """

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Embed one text. Raises EmbeddingError on empty text or model failure."""
        pass

    @abstractmethod
    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed many texts; empty inputs map to empty vectors."""
        pass

    async def aembed_text(self, text: str) -> list[float]:
        """Embed one text in a worker thread."""
        return await asyncio.to_thread(self.embed_text, text)

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Vector length (used to create the collection)."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        pass
