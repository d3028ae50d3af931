"""
Startup collection check: configuration errors are logged, never raised.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

import main
from app.domain.exceptions import EmbeddingError, VectorStoreError


@pytest.mark.asyncio
async def test_missing_embedding_extra_does_not_abort_startup(monkeypatch):
    def missing_extra():
        raise EmbeddingError("sentence-transformers is not installed (install the 'local' extra)")

    monkeypatch.setattr(main, "get_embedding_provider", missing_extra)

    await main._ensure_collection()


@pytest.mark.asyncio
async def test_bad_database_url_does_not_abort_startup(monkeypatch):
    def bad_url():
        raise VectorStoreError("configure", "DATABASE_URL must start with postgresql://")

    monkeypatch.setattr(main, "get_embedding_provider", lambda: MagicMock(dimension=384))
    monkeypatch.setattr(main, "get_vector_store", bad_url)

    await main._ensure_collection()


@pytest.mark.asyncio
async def test_collection_created_with_provider_dimension(monkeypatch):
    store = MagicMock()
    store.ensure_collection = AsyncMock(return_value=True)
    monkeypatch.setattr(main, "get_embedding_provider", lambda: MagicMock(dimension=384))
    monkeypatch.setattr(main, "get_vector_store", lambda: store)

    await main._ensure_collection()

    store.ensure_collection.assert_awaited_once_with(384)
