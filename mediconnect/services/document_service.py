"""
Verification document uploads for staff accounts.
"""
from typing import Optional
from sqlalchemy.orm import Session

from mediconnect.core.exceptions import ForbiddenError, NotFoundError
from mediconnect.core.logging import security_logger
from mediconnect.core.permissions import require_user
from mediconnect.db.kv_store import DOCUMENT_PREFIX, USER_PREFIX, KVStore
from mediconnect.schemas.audit import AuditAction
from mediconnect.schemas.base import utcnow
from mediconnect.schemas.document import Document
from mediconnect.schemas.user import User, UserStatus
from mediconnect.services.audit_service import AuditService
from mediconnect.services.storage_service import StorageService
from mediconnect.utils.file_utils import validate_document


def document_key(user_id: str) -> str:
    return f"{DOCUMENT_PREFIX}{user_id}"


class DocumentService:
    """Service for storing and looking up one verification document per user."""

    def __init__(self, db: Session, storage: StorageService):
        self.store = KVStore(db)
        self.audit = AuditService(db)
        self.storage = storage

    def upload_for_signup(
        self,
        user_id: str,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes
    ) -> Document:
        """Attach a document to a freshly registered account (no token yet).

        Only pending accounts qualify; afterwards the owner must use the
        authenticated upload.
        """
        user_doc = self.store.get(f"{USER_PREFIX}{user_id}")
        if not user_doc:
            raise NotFoundError("User not found. Please try signing up again.")

        user = User.from_document(user_doc)
        if user.status != UserStatus.PENDING:
            security_logger.log_permission_denied(user_id, "signup document", f"status {user.status.value}")
            raise ForbiddenError("Documents can only be uploaded here while the account is pending")

        return self._store_document(user, filename, content_type, content)

    def upload(
        self,
        caller: User,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes
    ) -> Document:
        """Attach or replace the calling user's own document."""
        require_user(caller)
        return self._store_document(caller, filename, content_type, content)

    def get_document(self, caller: User, user_id: str) -> Optional[Document]:
        """Get a user's document; admins see any, others only their own."""
        require_user(caller)
        if not caller.is_admin and caller.id != user_id:
            security_logger.log_permission_denied(caller.id, f"document {user_id}", "not owner")
            raise ForbiddenError("Not authorized to view this document")

        document = self.store.get(document_key(user_id))
        return Document.from_document(document) if document else None

    def _store_document(
        self,
        user: User,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes
    ) -> Document:
        validate_document(filename, content_type, len(content), self.storage.settings)

        previous = self.store.get(document_key(user.id))
        file_path, public_url = self.storage.save_file(content, user.id, filename, content_type)

        document = Document(
            user_id=user.id,
            file_name=filename,
            file_path=file_path,
            public_url=public_url,
            uploaded_at=utcnow(),
            file_size=len(content),
            file_type=content_type
        )
        self.store.set(document_key(user.id), document.to_document())

        # Point the profile at the new document
        user_doc = self.store.get(f"{USER_PREFIX}{user.id}")
        if user_doc is not None:
            user_doc["verificationDocument"] = public_url
            self.store.set(f"{USER_PREFIX}{user.id}", user_doc)

        if previous and previous.get("filePath") != file_path:
            self.storage.delete_file(previous["filePath"])

        self.audit.record(
            AuditAction.UPLOAD_DOCUMENT, user.id,
            target_id=user.id, target_email=user.email,
            metadata={"fileName": filename, "fileSize": len(content)}
        )
        security_logger.log_document_upload(user.id, filename, len(content))
        return document
