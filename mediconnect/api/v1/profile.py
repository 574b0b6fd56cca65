"""
Account settings API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediconnect.db.session import get_db
from mediconnect.dependencies import get_current_user, get_identity_provider
from mediconnect.schemas.auth import PasswordChange
from mediconnect.schemas.base import SuccessResponse
from mediconnect.schemas.user import ProfileUpdate, ProfileUpdateResponse, User
from mediconnect.services.identity_service import IdentityProvider
from mediconnect.services.user_service import UserService

router = APIRouter()


@router.post("/update-profile", response_model=ProfileUpdateResponse)
def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """Update name, phone, service area or specialization."""
    user = UserService(db, identity).update_profile(current_user, data)
    return ProfileUpdateResponse(user=user)


@router.post("/change-password", response_model=SuccessResponse)
def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """Set a new password."""
    UserService(db, identity).change_password(current_user, data.new_password)
    return SuccessResponse(message="Password changed successfully")
