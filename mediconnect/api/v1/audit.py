"""
Audit log API endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediconnect.db.session import get_db
from mediconnect.dependencies import get_current_user
from mediconnect.schemas.audit import AuditLogListResponse
from mediconnect.schemas.user import User
from mediconnect.services.audit_service import AuditService

router = APIRouter()


@router.get("/logs", response_model=AuditLogListResponse)
def list_audit_logs(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Every audit entry, newest first (admin)."""
    return AuditLogListResponse(logs=AuditService(db).list_all(current_user))
