"""
Key-value table backing every domain record.
"""
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from mediconnect.db.base import Base


class KVEntry(Base):
    """One JSON document stored under a string key."""
    __tablename__ = "kv_store"

    key = Column(String(255), primary_key=True)
    value = Column(JSON, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<KVEntry(key='{self.key}')>"
