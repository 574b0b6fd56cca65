"""
Audit log service: append-only record of privileged actions.
"""
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from mediconnect.core.exceptions import AppError
from mediconnect.core.logging import get_logger
from mediconnect.core.permissions import require_role
from mediconnect.db.kv_store import AUDIT_PREFIX, KVStore, new_key
from mediconnect.schemas.audit import AuditAction, AuditLogEntry
from mediconnect.schemas.base import utcnow
from mediconnect.schemas.user import Role, User

logger = get_logger(__name__)


class AuditService:
    """Service for writing and reading audit entries."""

    def __init__(self, db: Session):
        self.store = KVStore(db)

    def record(
        self,
        action: AuditAction,
        actor_id: Optional[str],
        target_id: Optional[str] = None,
        target_email: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Optional[AuditLogEntry]:
        """Append an audit entry.

        A store failure is logged and swallowed so that it never fails the
        operation being audited; ``None`` is returned in that case.
        """
        entry = AuditLogEntry(
            id=new_key(AUDIT_PREFIX),
            action=action,
            performed_by=actor_id,
            target_id=target_id,
            target_email=target_email,
            metadata=metadata or {},
            timestamp=utcnow()
        )

        try:
            self.store.set(entry.id, entry.to_document())
        except AppError as e:
            logger.error(f"Failed to write audit entry {action.value} by {actor_id}: {e}")
            return None

        logger.info(f"AUDIT - {action.value} - actor {actor_id} - target {target_id}")
        return entry

    def list_all(self, caller: User) -> List[AuditLogEntry]:
        """List every audit entry, newest first (admin only)."""
        require_role(caller, Role.ADMIN, message="Admin access required")

        entries = [AuditLogEntry.from_document(doc) for doc in self.store.get_by_prefix(AUDIT_PREFIX)]
        # Break timestamp ties by key so the order is stable
        entries.sort(key=lambda entry: (entry.timestamp, entry.id), reverse=True)
        return entries
