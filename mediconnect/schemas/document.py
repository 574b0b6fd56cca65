"""
Verification document schemas.
"""
from datetime import datetime
from typing import Optional

from mediconnect.schemas.base import CamelModel, SuccessResponse


class Document(CamelModel):
    """Metadata for a staff member's verification document."""
    user_id: str
    file_name: str
    file_path: str
    public_url: str
    uploaded_at: datetime
    file_size: Optional[int] = None
    file_type: Optional[str] = None


class DocumentUploadResponse(SuccessResponse):
    document_url: str
    document: Document


class DocumentResponse(CamelModel):
    document: Optional[Document] = None
