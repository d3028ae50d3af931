"""Qdrant vector store implementation."""

from typing import Any, Dict, List, Optional
import logging

from qdrant_client import AsyncQdrantClient, models

from app.domain.exceptions import VectorStoreError
from .base import (
    PointId,
    PointUpdate,
    RangeFilter,
    ScoredItem,
    ScrollPage,
    StoredPoint,
    VectorStore,
)

logger = logging.getLogger(__name__)


class QdrantVectorStore(VectorStore):
    """
    Single-collection Qdrant backend (async client).

    Client errors are wrapped in VectorStoreError so callers only handle
    domain exceptions.
    """

    def __init__(
        self,
        collection_name: str,
        url: Optional[str] = None,
        host: str = "localhost",
        port: int = 6333,
        api_key: Optional[str] = None,
        client: Optional[AsyncQdrantClient] = None,
    ):
        if client is not None:
            self.client = client
        elif url:
            self.client = AsyncQdrantClient(url=url, api_key=api_key)
        else:
            self.client = AsyncQdrantClient(host=host, port=port, api_key=api_key)
        self._collection = collection_name

    @property
    def collection_name(self) -> str:
        return self._collection

    async def ensure_collection(self, dimension: int) -> bool:
        try:
            if await self.client.collection_exists(self._collection):
                logger.info(f"Collection '{self._collection}' already exists")
                return False

            await self.client.create_collection(
                collection_name=self._collection,
                vectors_config=models.VectorParams(
                    size=dimension, distance=models.Distance.COSINE
                ),
            )
        except Exception as e:
            raise VectorStoreError("ensure_collection", str(e)) from e

        logger.info(f"Created collection '{self._collection}' (dim={dimension}, cosine)")
        return True

    async def upsert(self, point_id: PointId, vector: List[float], payload: Dict[str, Any]) -> None:
        try:
            await self.client.upsert(
                collection_name=self._collection,
                points=[models.PointStruct(id=point_id, vector=vector, payload=payload)],
            )
        except Exception as e:
            raise VectorStoreError("upsert", str(e)) from e

    async def search(
        self, vector: List[float], limit: int, with_payload: bool = True
    ) -> List[ScoredItem]:
        try:
            response = await self.client.query_points(
                collection_name=self._collection,
                query=vector,
                limit=limit,
                with_payload=with_payload,
            )
        except Exception as e:
            raise VectorStoreError("search", str(e)) from e

        return [
            ScoredItem(id=point.id, score=point.score, payload=point.payload or {})
            for point in response.points
        ]

    async def scroll(
        self,
        offset: Optional[PointId],
        limit: int,
        with_payload: bool = True,
        with_vector: bool = False,
        scroll_filter: Optional[RangeFilter] = None,
    ) -> ScrollPage:
        qdrant_filter = None
        if scroll_filter is not None:
            qdrant_filter = models.Filter(
                must=[
                    models.FieldCondition(
                        key=scroll_filter.key,
                        range=models.Range(lt=scroll_filter.lt),
                    )
                ]
            )

        try:
            records, next_offset = await self.client.scroll(
                collection_name=self._collection,
                scroll_filter=qdrant_filter,
                limit=limit,
                offset=offset,
                with_payload=with_payload,
                with_vectors=with_vector,
            )
        except Exception as e:
            raise VectorStoreError("scroll", str(e)) from e

        return ScrollPage(
            points=[StoredPoint(id=record.id, payload=record.payload) for record in records],
            next_page_offset=next_offset,
        )

    async def set_payload_batch(self, updates: List[PointUpdate], wait: bool = False) -> None:
        if not updates:
            return

        # One SetPayload per point: every point carries its own score
        operations = [
            models.SetPayloadOperation(
                set_payload=models.SetPayload(payload=update.payload, points=[update.id])
            )
            for update in updates
        ]
        try:
            await self.client.batch_update_points(
                collection_name=self._collection,
                update_operations=operations,
                wait=wait,
            )
        except Exception as e:
            raise VectorStoreError("set_payload", str(e)) from e

    async def delete(self, point_ids: List[PointId]) -> None:
        try:
            await self.client.delete(
                collection_name=self._collection,
                points_selector=models.PointIdsList(points=list(point_ids)),
            )
        except Exception as e:
            raise VectorStoreError("delete", str(e)) from e

    async def ping(self) -> None:
        try:
            await self.client.get_collections()
        except Exception as e:
            raise VectorStoreError("ping", str(e)) from e

    async def close(self) -> None:
        await self.client.close()
