"""
Assistant search API endpoint.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mediconnect.db.session import get_db
from mediconnect.dependencies import get_current_user, get_identity_provider
from mediconnect.schemas.user import AssistantSearchResponse, User
from mediconnect.services.identity_service import IdentityProvider
from mediconnect.services.user_service import UserService

router = APIRouter()


@router.get("/search", response_model=AssistantSearchResponse)
def search_assistants(
    area: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """Find approved assistants by service area and/or name."""
    assistants = UserService(db, identity).search_assistants(current_user, area=area, name=name)
    return AssistantSearchResponse(assistants=assistants)
