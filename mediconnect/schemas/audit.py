"""
Audit log schemas.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from mediconnect.schemas.base import CamelModel


class AuditAction(str, Enum):
    SIGNUP = "signup"
    APPROVE_USER = "approve_user"
    REJECT_USER = "reject_user"
    SEND_REQUEST = "send_request"
    ACCEPT_REQUEST = "accept_request"
    CANCEL_REQUEST = "cancel_request"
    UPLOAD_REPORT = "upload_report"
    CREATE_REVIEW = "create_review"
    UPLOAD_DOCUMENT = "upload_document"


class AuditLogEntry(CamelModel):
    """Append-only record of a privileged action."""
    id: str
    action: AuditAction
    performed_by: Optional[str] = None
    target_id: Optional[str] = None
    target_email: Optional[str] = None
    metadata: Dict[str, Any] = {}
    timestamp: datetime


class AuditLogListResponse(CamelModel):
    logs: List[AuditLogEntry]
