"""
User management API endpoints (admin).
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediconnect.db.session import get_db
from mediconnect.dependencies import get_current_user, get_identity_provider
from mediconnect.schemas.user import (
    ApproveUserRequest, DashboardStats, RejectUserRequest, User,
    UserListResponse, UserStatusResponse
)
from mediconnect.services.identity_service import IdentityProvider
from mediconnect.services.user_service import UserService

router = APIRouter()


@router.get("/all", response_model=UserListResponse)
def list_all_users(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """List every user."""
    return UserListResponse(users=UserService(db, identity).list_all(current_user))


@router.get("/pending", response_model=UserListResponse)
def list_pending_users(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """List users waiting for approval."""
    return UserListResponse(users=UserService(db, identity).list_pending(current_user))


@router.get("/stats", response_model=DashboardStats)
def get_user_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """Counts for the admin dashboard."""
    return UserService(db, identity).get_stats(current_user)


@router.post("/approve", response_model=UserStatusResponse)
def approve_user(
    data: ApproveUserRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """Approve a pending user."""
    user = UserService(db, identity).approve(current_user, data.user_id)
    return UserStatusResponse(message="User approved", user=user)


@router.post("/reject", response_model=UserStatusResponse)
def reject_user(
    data: RejectUserRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """Reject a user with an optional reason."""
    user = UserService(db, identity).reject(current_user, data.user_id, data.reason)
    return UserStatusResponse(message="User rejected", user=user)
