"""
Postgres + pgvector vector store implementation.

Synchronous SQLAlchemy/SQLModel sessions run in worker threads
(asyncio.to_thread) so the event loop never blocks on the database.
Scroll pages are keyset-paginated on id: the next page's offset is the id
of the first row past the page, so deletes between pages never skip rows.
"""

from typing import Any, Dict, List, Optional, Sequence
import asyncio
import logging

from sqlalchemy import Engine, delete, inspect, select, text
from sqlmodel import Session, SQLModel, create_engine

from app.domain.exceptions import VectorStoreError
from app.models.database.memory_record import MemoryRecord
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


def psycopg_url(database_url: str) -> str:
    """Force the psycopg (v3) driver on a postgres URL."""
    if database_url.startswith("postgresql+psycopg://"):
        return database_url
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+psycopg://", 1)
    raise VectorStoreError(
        "configure", "DATABASE_URL must start with postgresql:// or postgresql+psycopg://"
    )


def search_statement(vector: List[float], limit: int):
    distance = MemoryRecord.embedding.cosine_distance(vector).label("distance")
    return select(MemoryRecord, distance).order_by(distance).limit(limit)


def scroll_statement(
    offset: Optional[PointId], limit: int, scroll_filter: Optional[RangeFilter] = None
):
    """One row more than the page so the next offset is known."""
    statement = select(MemoryRecord).order_by(MemoryRecord.id)
    if offset is not None:
        statement = statement.where(MemoryRecord.id >= str(offset))
    if scroll_filter is not None:
        statement = statement.where(
            MemoryRecord.payload[scroll_filter.key].as_float() < scroll_filter.lt
        )
    return statement.limit(limit + 1)


def page_from_rows(
    records: Sequence[MemoryRecord], limit: int, with_payload: bool = True
) -> ScrollPage:
    page = records[:limit]
    next_offset = records[limit].id if len(records) > limit else None
    return ScrollPage(
        points=[
            StoredPoint(id=record.id, payload=record.payload if with_payload else None)
            for record in page
        ],
        next_page_offset=next_offset,
    )


class PgVectorStore(VectorStore):
    """Single-table pgvector backend (cosine distance)."""

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            if not database_url:
                raise VectorStoreError("configure", "DATABASE_URL is required for the pgvector backend")
            engine = create_engine(psycopg_url(database_url), pool_pre_ping=True)
        self.engine = engine
        # Set by ensure_collection; the column itself is dimensionless
        self.dimension: Optional[int] = None

    @property
    def collection_name(self) -> str:
        return MemoryRecord.__tablename__

    async def _run(self, operation: str, fn, *args):
        try:
            return await asyncio.to_thread(fn, *args)
        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(operation, str(e)) from e

    def _check_dimension(self, operation: str, vector: List[float]) -> None:
        if self.dimension is not None and len(vector) != self.dimension:
            raise VectorStoreError(
                operation, f"expected a {self.dimension}-dimensional vector, got {len(vector)}"
            )

    # ═══════════════════════════════════════════════════════════════════
    # Sync bodies (worker thread)
    # ═══════════════════════════════════════════════════════════════════

    def _ensure_table(self) -> bool:
        with self.engine.begin() as conn:
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
            existed = inspect(conn).has_table(MemoryRecord.__tablename__)
            SQLModel.metadata.create_all(conn, tables=[MemoryRecord.__table__])
        return not existed

    def _upsert(self, point_id: PointId, vector: List[float], payload: Dict[str, Any]) -> None:
        with Session(self.engine) as session:
            session.merge(MemoryRecord(id=str(point_id), embedding=vector, payload=payload))
            session.commit()

    def _search(self, vector: List[float], limit: int, with_payload: bool) -> List[ScoredItem]:
        with Session(self.engine) as session:
            rows = session.execute(search_statement(vector, limit)).all()
        return [
            ScoredItem(
                id=record.id,
                score=1 - distance,
                payload=(record.payload or {}) if with_payload else {},
            )
            for record, distance in rows
        ]

    def _scroll(
        self,
        offset: Optional[PointId],
        limit: int,
        with_payload: bool,
        scroll_filter: Optional[RangeFilter],
    ) -> ScrollPage:
        with Session(self.engine) as session:
            records = session.execute(scroll_statement(offset, limit, scroll_filter)).scalars().all()
        return page_from_rows(records, limit, with_payload)

    def _set_payloads(self, updates: List[PointUpdate]) -> None:
        with Session(self.engine) as session:
            for update in updates:
                record = session.get(MemoryRecord, str(update.id))
                if record is None:
                    continue
                # Reassign so the JSONB change is tracked
                record.payload = {**(record.payload or {}), **update.payload}
                session.add(record)
            session.commit()

    def _delete(self, point_ids: List[PointId]) -> None:
        with Session(self.engine) as session:
            session.execute(
                delete(MemoryRecord).where(MemoryRecord.id.in_([str(i) for i in point_ids]))
            )
            session.commit()

    def _ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    # ═══════════════════════════════════════════════════════════════════
    # VectorStore interface
    # ═══════════════════════════════════════════════════════════════════

    async def ensure_collection(self, dimension: int) -> bool:
        created = await self._run("ensure_collection", self._ensure_table)
        self.dimension = dimension
        if created:
            logger.info(f"Created table '{self.collection_name}' (pgvector, cosine)")
        else:
            logger.info(f"Table '{self.collection_name}' already exists")
        return created

    async def upsert(self, point_id: PointId, vector: List[float], payload: Dict[str, Any]) -> None:
        self._check_dimension("upsert", vector)
        await self._run("upsert", self._upsert, point_id, vector, payload)

    async def search(
        self, vector: List[float], limit: int, with_payload: bool = True
    ) -> List[ScoredItem]:
        self._check_dimension("search", vector)
        return await self._run("search", self._search, vector, limit, with_payload)

    async def scroll(
        self,
        offset: Optional[PointId],
        limit: int,
        with_payload: bool = True,
        with_vector: bool = False,
        scroll_filter: Optional[RangeFilter] = None,
    ) -> ScrollPage:
        return await self._run("scroll", self._scroll, offset, limit, with_payload, scroll_filter)

    async def set_payload_batch(self, updates: List[PointUpdate], wait: bool = False) -> None:
        """One transaction for all updates; `wait` has no effect (commits are synchronous)."""
        if not updates:
            return
        await self._run("set_payload", self._set_payloads, updates)

    async def delete(self, point_ids: List[PointId]) -> None:
        await self._run("delete", self._delete, list(point_ids))

    async def ping(self) -> None:
        await self._run("ping", self._ping)

    async def close(self) -> None:
        self.engine.dispose()
