# Database models (SQLModel tables)

from app.models.database.memory_record import MemoryRecord

__all__ = ["MemoryRecord"]
