"""
User directory schemas.
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from mediconnect.schemas.base import CamelModel, SuccessResponse


class Role(str, Enum):
    PATIENT = "patient"
    ASSISTANT = "assistant"
    DOCTOR = "doctor"
    ADMIN = "admin"


class UserStatus(str, Enum):
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


# Roles that need admin approval before they can sign in
STAFF_ROLES = (Role.ASSISTANT, Role.DOCTOR)


class User(CamelModel):
    """User profile record, keyed by identity provider id."""
    id: str
    email: str
    name: str
    role: Role
    status: UserStatus

    phone: Optional[str] = None
    area: Optional[str] = None
    specialization: Optional[str] = None
    verification_document: Optional[str] = None

    # Timestamps
    created_at: datetime
    updated_at: Optional[datetime] = None

    # Approval decision
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejection_reason: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        """Check if user is an admin."""
        return self.role == Role.ADMIN

    @property
    def is_staff(self) -> bool:
        """Check if user is an assistant or doctor."""
        return self.role in STAFF_ROLES

    @property
    def can_sign_in(self) -> bool:
        """Staff accounts must be approved; other roles always can."""
        return not self.is_staff or self.status == UserStatus.APPROVED


class UserResponse(CamelModel):
    user: Optional[User] = None


class UserListResponse(CamelModel):
    users: List[User]


class ApproveUserRequest(CamelModel):
    user_id: str


class RejectUserRequest(CamelModel):
    user_id: str
    reason: Optional[str] = None


class UserStatusResponse(SuccessResponse):
    user: User


class ProfileUpdate(CamelModel):
    """Self-service profile fields. Email is immutable."""
    name: Optional[str] = None
    phone: Optional[str] = None
    area: Optional[str] = None
    specialization: Optional[str] = None


class ProfileUpdateResponse(SuccessResponse):
    user: User


class AssistantSearchResponse(CamelModel):
    assistants: List[User]


class DashboardStats(CamelModel):
    """Admin dashboard summary counts."""
    total_users: int
    pending_approvals: int
    users_by_role: Dict[str, int]
    users_by_status: Dict[str, int]
    requests_by_status: Dict[str, int]
    reports_by_status: Dict[str, int]
