"""
User directory: registration, sign-in gating, approval and profiles.
"""
from collections import Counter
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from mediconnect.core.exceptions import (
    ApprovalRequiredError, NotFoundError, ValidationError
)
from mediconnect.core.logging import get_logger, security_logger
from mediconnect.core.permissions import require_role, require_user
from mediconnect.db.kv_store import (
    REPORT_PREFIX, REQUEST_PREFIX, USER_PREFIX, KVStore
)
from mediconnect.schemas.audit import AuditAction
from mediconnect.schemas.auth import SignUpRequest
from mediconnect.schemas.base import utcnow
from mediconnect.schemas.user import (
    DashboardStats, ProfileUpdate, Role, User, UserStatus
)
from mediconnect.services.audit_service import AuditService
from mediconnect.services.identity_service import IdentityProvider

logger = get_logger(__name__)

PROFILE_FIELDS = ("name", "phone", "area", "specialization")


def user_key(user_id: str) -> str:
    return f"{USER_PREFIX}{user_id}"


class UserService:
    """Service for user records and the admin approval workflow."""

    def __init__(self, db: Session, identity: IdentityProvider):
        self.db = db
        self.identity = identity
        self.store = KVStore(db)
        self.audit = AuditService(db)

    def get_user(self, user_id: str) -> Optional[User]:
        """Get user record by id."""
        document = self.store.get(user_key(user_id))
        return User.from_document(document) if document else None

    def get_user_or_404(self, user_id: str, message: str = "User not found") -> User:
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError(message)
        return user

    def save_user(self, user: User) -> User:
        self.store.set(user_key(user.id), user.to_document())
        return user

    def all_users(self) -> List[User]:
        users = [User.from_document(doc) for doc in self.store.get_by_prefix(USER_PREFIX)]
        users.sort(key=lambda u: u.created_at, reverse=True)
        return users

    # Registration and sign-in

    def register(self, data: SignUpRequest) -> Tuple[User, bool]:
        """Create credentials and a user record.

        Patients are approved immediately; assistants and doctors start
        pending. Returns the record and whether admin approval is needed.
        """
        role = Role(data.role)
        user_id = self.identity.create_user(
            data.email, data.password, {"name": data.name, "role": role.value}
        )

        status = UserStatus.APPROVED if role == Role.PATIENT else UserStatus.PENDING
        user = self.save_user(User(
            id=user_id,
            email=data.email.lower(),
            name=data.name,
            role=role,
            status=status,
            phone=data.phone or None,
            area=data.area or None,
            specialization=data.specialization or None,
            created_at=utcnow()
        ))

        self.audit.record(
            AuditAction.SIGNUP, user.id,
            target_id=user.id, target_email=user.email,
            metadata={"role": role.value}
        )
        security_logger.log_signup(user.id, user.email, role.value)
        return user, status == UserStatus.PENDING

    def authenticate(self, email: str, password: str) -> Tuple[str, User]:
        """Verify credentials and return an access token with the user record.

        Staff accounts that are pending or rejected are refused even when the
        password is correct.
        """
        try:
            user_id = self.identity.verify_credentials(email, password)
        except ValidationError as e:
            security_logger.log_login_attempt(email, False, e.message)
            raise

        user = self.get_user_or_404(user_id, "User data not found")
        self.ensure_can_sign_in(user)

        token = self.identity.create_session(user.id)
        security_logger.log_login_attempt(email, True)
        return token, user

    def ensure_can_sign_in(self, user: User) -> User:
        """Refuse staff accounts that have not been approved."""
        if user.can_sign_in:
            return user

        if user.status == UserStatus.REJECTED:
            message = "Your account has been rejected"
        else:
            message = "Your account is pending admin approval"
        security_logger.log_login_attempt(user.email, False, message)
        raise ApprovalRequiredError(message)

    # Admin operations

    def list_all(self, caller: User) -> List[User]:
        """List every user (admin only)."""
        require_role(caller, Role.ADMIN, message="Admin access required")
        return self.all_users()

    def list_pending(self, caller: User) -> List[User]:
        """List users awaiting approval (admin only)."""
        require_role(caller, Role.ADMIN, message="Admin access required")
        return [u for u in self.all_users() if u.status == UserStatus.PENDING]

    def approve(self, caller: User, user_id: str) -> User:
        """Approve a user. Re-approving re-stamps and logs again."""
        require_role(caller, Role.ADMIN, message="Admin access required")
        target = self.get_user_or_404(user_id)

        target.status = UserStatus.APPROVED
        target.approved_at = utcnow()
        target.approved_by = caller.id
        self.save_user(target)

        self.audit.record(
            AuditAction.APPROVE_USER, caller.id,
            target_id=target.id, target_email=target.email
        )
        security_logger.log_status_change(caller.id, target.id, target.status.value)
        logger.info(f"Approved user: {target.email}")
        return target

    def reject(self, caller: User, user_id: str, reason: Optional[str] = None) -> User:
        """Reject a user with an optional free-text reason."""
        require_role(caller, Role.ADMIN, message="Admin access required")
        target = self.get_user_or_404(user_id)

        target.status = UserStatus.REJECTED
        target.rejected_at = utcnow()
        target.rejected_by = caller.id
        target.rejection_reason = reason or None
        self.save_user(target)

        self.audit.record(
            AuditAction.REJECT_USER, caller.id,
            target_id=target.id, target_email=target.email,
            metadata={"rejectionReason": reason or None}
        )
        security_logger.log_status_change(caller.id, target.id, target.status.value)
        logger.info(f"Rejected user: {target.email}")
        return target

    def get_stats(self, caller: User) -> DashboardStats:
        """Summary counts for the admin dashboard."""
        require_role(caller, Role.ADMIN, message="Admin access required")
        users = self.all_users()
        requests = self.store.get_by_prefix(REQUEST_PREFIX)
        reports = self.store.get_by_prefix(REPORT_PREFIX)

        by_status = Counter(u.status.value for u in users)
        return DashboardStats(
            total_users=len(users),
            pending_approvals=by_status.get(UserStatus.PENDING.value, 0),
            users_by_role=dict(Counter(u.role.value for u in users)),
            users_by_status=dict(by_status),
            requests_by_status=dict(Counter(r.get("status") for r in requests)),
            reports_by_status=dict(Counter(r.get("status") for r in reports))
        )

    # Search

    def search_assistants(self, caller: User, area: Optional[str] = None, name: Optional[str] = None) -> List[User]:
        """Approved assistants, filtered by case-insensitive area/name substring."""
        require_user(caller)
        assistants = [
            u for u in self.all_users()
            if u.role == Role.ASSISTANT and u.status == UserStatus.APPROVED
        ]

        if area:
            assistants = [a for a in assistants if area.lower() in (a.area or "").lower()]
        if name:
            assistants = [a for a in assistants if name.lower() in a.name.lower()]
        return assistants

    # Self-service

    def update_profile(self, caller: User, data: ProfileUpdate) -> User:
        """Update name/phone/area/specialization; empty values keep the current one."""
        require_user(caller)
        user = self.get_user_or_404(caller.id)

        for field in PROFILE_FIELDS:
            value = getattr(data, field)
            if value:
                setattr(user, field, value)
        user.updated_at = utcnow()
        return self.save_user(user)

    def change_password(self, caller: User, new_password: str) -> None:
        """Set a new password. The old password is not re-checked."""
        require_user(caller)
        self.identity.update_password(caller.id, new_password)
        security_logger.log_password_change(caller.id)
