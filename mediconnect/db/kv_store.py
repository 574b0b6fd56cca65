"""
Key-value document store over a single SQLAlchemy table.

Every write commits on its own. Updates are last-write-wins: callers read a
whole document, change fields and write the whole document back.
"""
import time
import uuid
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mediconnect.core.exceptions import UpstreamError
from mediconnect.core.logging import get_logger
from mediconnect.models.kv_entry import KVEntry

logger = get_logger(__name__)

# Key prefixes, one per record type
USER_PREFIX = "user:"
REQUEST_PREFIX = "req:"
REPORT_PREFIX = "report:"
REVIEW_PREFIX = "review:"
AUDIT_PREFIX = "audit:"
DOCUMENT_PREFIX = "document:"


def new_key(prefix: str) -> str:
    """Build a unique, creation-ordered key such as ``req:1733050800000:9f2c...``."""
    return f"{prefix}{int(time.time() * 1000)}:{uuid.uuid4().hex[:12]}"


class KVStore:
    """Get, set and prefix-scan JSON documents."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get document by key."""
        try:
            entry = self.db.get(KVEntry, key)
        except SQLAlchemyError as e:
            raise self._failure("get", key, e)
        return dict(entry.value) if entry is not None else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        """Insert or replace the document stored under key."""
        try:
            self.db.merge(KVEntry(key=key, value=value))
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._failure("set", key, e)

    def get_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        """Get every document whose key starts with prefix."""
        try:
            entries = self.db.query(KVEntry).filter(
                KVEntry.key.startswith(prefix, autoescape=True)
            ).order_by(KVEntry.key).all()
        except SQLAlchemyError as e:
            raise self._failure("get_by_prefix", prefix, e)
        return [dict(entry.value) for entry in entries]

    def delete(self, key: str) -> bool:
        """Delete document by key."""
        try:
            deleted = self.db.query(KVEntry).filter(KVEntry.key == key).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._failure("delete", key, e)
        return deleted > 0

    def _failure(self, operation: str, key: str, error: SQLAlchemyError) -> UpstreamError:
        self.db.rollback()
        logger.error(f"KV store {operation} failed for '{key}': {error}")
        return UpstreamError("Storage operation failed")
