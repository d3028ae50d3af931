"""
Tests for QdrantVectorStore against a mocked AsyncQdrantClient.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from qdrant_client import models

from app.domain.exceptions import VectorStoreError
from app.services.vector_store import PointUpdate, QdrantVectorStore, RangeFilter


@pytest.fixture
def client():
    return AsyncMock()


@pytest.fixture
def qdrant(client):
    return QdrantVectorStore(collection_name="streamer_memory", client=client)


class TestCollection:

    @pytest.mark.asyncio
    async def test_existing_collection_left_alone(self, qdrant, client):
        client.collection_exists.return_value = True

        created = await qdrant.ensure_collection(1536)

        assert created is False
        client.create_collection.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_collection_created_with_cosine(self, qdrant, client):
        client.collection_exists.return_value = False

        created = await qdrant.ensure_collection(384)

        assert created is True
        vectors_config = client.create_collection.await_args.kwargs["vectors_config"]
        assert vectors_config.size == 384
        assert vectors_config.distance == models.Distance.COSINE


class TestReadsAndWrites:

    @pytest.mark.asyncio
    async def test_search_maps_scored_points(self, qdrant, client):
        client.query_points.return_value = SimpleNamespace(
            points=[
                SimpleNamespace(id="a", score=0.9, payload={"content": "x"}),
                SimpleNamespace(id="b", score=0.7, payload=None),
            ]
        )

        items = await qdrant.search([0.1, 0.2], limit=20)

        assert client.query_points.await_args.kwargs["limit"] == 20
        assert [(i.id, i.score) for i in items] == [("a", 0.9), ("b", 0.7)]
        assert items[1].payload == {}

    @pytest.mark.asyncio
    async def test_scroll_builds_range_filter(self, qdrant, client):
        client.scroll.return_value = ([SimpleNamespace(id=1, payload={"k": 1})], 2)

        page = await qdrant.scroll(
            offset=None, limit=100, scroll_filter=RangeFilter(key="timestamp_created", lt=123.0)
        )

        qdrant_filter = client.scroll.await_args.kwargs["scroll_filter"]
        condition = qdrant_filter.must[0]
        assert condition.key == "timestamp_created"
        assert condition.range.lt == 123.0
        assert client.scroll.await_args.kwargs["with_vectors"] is False
        assert page.next_page_offset == 2
        assert page.points[0].id == 1

    @pytest.mark.asyncio
    async def test_scroll_without_filter(self, qdrant, client):
        client.scroll.return_value = ([], None)

        page = await qdrant.scroll(offset=None, limit=10)

        assert client.scroll.await_args.kwargs["scroll_filter"] is None
        assert page.points == []
        assert page.next_page_offset is None

    @pytest.mark.asyncio
    async def test_payload_batch_keeps_per_point_payloads(self, qdrant, client):
        updates = [
            PointUpdate(id="a", payload={"weighted_access_score": 1.44}),
            PointUpdate(id="b", payload={"weighted_access_score": 2.94}),
        ]

        await qdrant.set_payload_batch(updates, wait=False)

        kwargs = client.batch_update_points.await_args.kwargs
        assert kwargs["wait"] is False
        operations = kwargs["update_operations"]
        assert [op.set_payload.points for op in operations] == [["a"], ["b"]]
        assert [op.set_payload.payload["weighted_access_score"] for op in operations] == [1.44, 2.94]

    @pytest.mark.asyncio
    async def test_empty_payload_batch_is_noop(self, qdrant, client):
        await qdrant.set_payload_batch([])
        client.batch_update_points.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_by_ids(self, qdrant, client):
        await qdrant.delete(["a", "b"])

        selector = client.delete.await_args.kwargs["points_selector"]
        assert selector.points == ["a", "b"]


class TestErrors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, call, args",
        [
            ("upsert", "upsert", ("id", [0.1], {})),
            ("search", "query_points", ([0.1], 5)),
            ("scroll", "scroll", (None, 5)),
            ("delete", "delete", (["id"],)),
            ("ping", "get_collections", ()),
        ],
    )
    async def test_client_errors_wrapped(self, qdrant, client, method, call, args):
        getattr(client, call).side_effect = ConnectionError("refused")

        with pytest.raises(VectorStoreError) as exc_info:
            await getattr(qdrant, method)(*args)

        assert exc_info.value.operation == method
        assert "refused" in str(exc_info.value)
        assert exc_info.value.category == "vector_store_error"
