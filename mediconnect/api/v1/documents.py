"""
Verification document API endpoints.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from mediconnect.db.session import get_db
from mediconnect.dependencies import get_current_user, get_storage_service
from mediconnect.schemas.document import DocumentResponse, DocumentUploadResponse
from mediconnect.schemas.user import User
from mediconnect.services.document_service import DocumentService
from mediconnect.services.storage_service import StorageService

router = APIRouter()


def read_limited(document: UploadFile, limit: int) -> bytes:
    """Read at most one byte past ``limit`` so oversized uploads are not buffered whole."""
    return document.file.read(limit + 1)


@router.post("/upload-signup", response_model=DocumentUploadResponse)
def upload_signup_document(
    document: UploadFile = File(...),
    user_id: str = Form(..., alias="userId"),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    """Upload a verification document right after signup (no token required)."""
    content = read_limited(document, storage.settings.MAX_DOCUMENT_SIZE)
    stored = DocumentService(db, storage).upload_for_signup(
        user_id, document.filename, document.content_type, content
    )
    return DocumentUploadResponse(document_url=stored.public_url, document=stored)


@router.post("/upload", response_model=DocumentUploadResponse)
def upload_document(
    document: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    """Upload or replace the caller's verification document."""
    content = read_limited(document, storage.settings.MAX_DOCUMENT_SIZE)
    stored = DocumentService(db, storage).upload(
        current_user, document.filename, document.content_type, content
    )
    return DocumentUploadResponse(document_url=stored.public_url, document=stored)


@router.get("/{user_id}", response_model=DocumentResponse)
def get_document(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
):
    """Get a user's verification document metadata (admin or owner)."""
    return DocumentResponse(document=DocumentService(db, storage).get_document(current_user, user_id))
