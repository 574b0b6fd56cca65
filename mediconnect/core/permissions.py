"""
Access control checks applied before mutating and privileged-read operations.
"""
from typing import Optional

from mediconnect.core.exceptions import ForbiddenError, UnauthenticatedError
from mediconnect.core.logging import security_logger
from mediconnect.schemas.user import Role, User


def has_role(user: Optional[User], *roles: Role) -> bool:
    """Check if user holds one of the given roles."""
    return user is not None and user.role in roles


def is_owner(user: Optional[User], owner_id: Optional[str]) -> bool:
    """Check if user is the owner named on a record."""
    return user is not None and owner_id is not None and user.id == owner_id


def require_user(user: Optional[User]) -> User:
    """Reject calls without a resolved caller."""
    if user is None:
        raise UnauthenticatedError()
    return user


def require_role(user: Optional[User], *roles: Role, message: str = None) -> User:
    """Reject callers whose role is not one of ``roles``."""
    user = require_user(user)
    if not has_role(user, *roles):
        names = " or ".join(role.value for role in roles)
        message = message or f"{names.capitalize()} access required"
        security_logger.log_permission_denied(user.id, names, message)
        raise ForbiddenError(message)
    return user


def require_owner(user: Optional[User], owner_id: Optional[str], message: str = None) -> User:
    """Reject callers that do not own the record."""
    user = require_user(user)
    if not is_owner(user, owner_id):
        message = message or "Not authorized to access this record"
        security_logger.log_permission_denied(user.id, f"owner {owner_id}", message)
        raise ForbiddenError(message)
    return user
