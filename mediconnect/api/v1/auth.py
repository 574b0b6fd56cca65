"""
Authentication API endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediconnect.core.logging import security_logger
from mediconnect.db.session import get_db
from mediconnect.dependencies import (
    get_bearer_token, get_current_user, get_identity_provider
)
from mediconnect.schemas.auth import (
    SignInRequest, SignInResponse, SignUpRequest, SignUpResponse
)
from mediconnect.schemas.base import SuccessResponse
from mediconnect.schemas.user import User, UserResponse
from mediconnect.services.identity_service import IdentityProvider
from mediconnect.services.user_service import UserService

router = APIRouter()


@router.post("/signup", response_model=SignUpResponse)
def signup(
    data: SignUpRequest,
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """Register an account. Assistants and doctors wait for admin approval."""
    user, needs_approval = UserService(db, identity).register(data)
    return SignUpResponse(user=user, status=user.status, needs_approval=needs_approval)


@router.post("/signin", response_model=SignInResponse)
def signin(
    data: SignInRequest,
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """Sign in with email and password."""
    token, user = UserService(db, identity).authenticate(data.email, data.password)
    return SignInResponse(access_token=token, user=user)


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: User = Depends(get_current_user)):
    """Get the caller's profile."""
    return UserResponse(user=current_user)


@router.post("/signout", response_model=SuccessResponse)
def signout(
    token: str = Depends(get_bearer_token),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """Revoke the presented access token."""
    user_id = identity.get_user_id(token)
    identity.sign_out(token)
    security_logger.log_logout(user_id)
    return SuccessResponse()
