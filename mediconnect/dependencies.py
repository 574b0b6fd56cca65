"""
FastAPI dependencies for dependency injection.
"""
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from mediconnect.core.config import Settings, settings
from mediconnect.core.exceptions import UnauthenticatedError
from mediconnect.core.logging import get_logger
from mediconnect.db.session import get_db
from mediconnect.schemas.user import User
from mediconnect.services.identity_service import IdentityProvider
from mediconnect.services.storage_service import StorageService
from mediconnect.services.user_service import UserService

logger = get_logger(__name__)

# Security scheme; missing headers are reported as 401 by get_bearer_token
security = HTTPBearer(auto_error=False)


def get_settings() -> Settings:
    """Application settings."""
    return settings


def get_identity_provider(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings)
) -> IdentityProvider:
    """Identity provider bound to the request's session."""
    return IdentityProvider(db, app_settings)


def get_storage_service(app_settings: Settings = Depends(get_settings)) -> StorageService:
    """Document storage backend."""
    return StorageService(app_settings)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """Extract the bearer token or raise 401."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("No token provided")
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
) -> User:
    """
    Resolve the bearer token to the caller's user record.

    Staff accounts that were rejected after their token was issued are
    refused here too.
    """
    user_id = identity.get_user_id(token)
    if user_id is None:
        raise UnauthenticatedError()

    users = UserService(db, identity)
    user = users.get_user(user_id)
    if user is None:
        raise UnauthenticatedError("User data not found")

    return users.ensure_can_sign_in(user)
