"""Memory row for the Postgres (pgvector) vector store backend."""

from typing import Any

from pgvector.sqlalchemy import Vector
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Column, Field, SQLModel


class MemoryRecord(SQLModel, table=True):
    """
    One stored memory.

    The scored fields (timestamps, weighted_access_score) live in the JSONB
    payload so both backends expose the same payload shape.
    """
    __tablename__ = "memory_items"

    id: str = Field(primary_key=True, max_length=64, description="UUID string assigned at ingestion")
    embedding: list[float] = Field(sa_column=Column(Vector(), nullable=False))
    payload: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSONB, nullable=False))
