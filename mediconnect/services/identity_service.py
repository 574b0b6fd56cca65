"""
Identity provider: credentials, access tokens and sign-out.

Constructed per request and passed to the services that need it, so there
is no process-wide client.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from mediconnect.core.config import Settings, settings as default_settings
from mediconnect.core.exceptions import UpstreamError, ValidationError
from mediconnect.core.logging import get_logger
from mediconnect.core.security import (
    create_access_token, get_password_hash, verify_password, verify_token
)
from mediconnect.models.credential import Credential, RevokedToken

logger = get_logger(__name__)


class IdentityProvider:
    """Authenticates credentials and resolves bearer tokens to user ids."""

    def __init__(self, db: Session, settings: Settings = default_settings):
        self.db = db
        self.settings = settings

    def get_credential(self, user_id: str) -> Optional[Credential]:
        """Get credential by user id."""
        return self.db.query(Credential).filter(Credential.id == user_id).first()

    def get_credential_by_email(self, email: str) -> Optional[Credential]:
        """Get credential by email."""
        return self.db.query(Credential).filter(Credential.email == email.lower()).first()

    def create_user(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> str:
        """Create a credential and return the new user id."""
        if self.get_credential_by_email(email):
            raise ValidationError("A user with this email address has already been registered")

        credential = Credential(
            id=str(uuid.uuid4()),
            email=email.lower(),
            hashed_password=get_password_hash(password),
            user_metadata=metadata or {}
        )
        try:
            self.db.add(credential)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("A user with this email address has already been registered")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create credential for {email}: {e}")
            raise UpstreamError("Identity provider unavailable")

        return credential.id

    def verify_credentials(self, email: str, password: str) -> str:
        """Check email and password, returning the user id."""
        credential = self.get_credential_by_email(email)
        if not credential or not verify_password(password, credential.hashed_password):
            raise ValidationError("Invalid login credentials")
        return credential.id

    def create_session(self, user_id: str) -> str:
        """Issue an access token for a verified user."""
        credential = self.get_credential(user_id)
        if credential is not None:
            credential.last_sign_in_at = datetime.now(timezone.utc)
            self.db.commit()

        return create_access_token(
            user_id,
            secret_key=self.settings.SECRET_KEY,
            algorithm=self.settings.ALGORITHM
        )

    def get_user_id(self, token: str) -> Optional[str]:
        """Resolve a token to its user id; None when invalid, expired or revoked."""
        payload = verify_token(token, secret_key=self.settings.SECRET_KEY, algorithm=self.settings.ALGORITHM)
        if payload is None:
            return None

        jti = payload.get("jti")
        if jti and self.db.get(RevokedToken, jti) is not None:
            return None
        return payload.get("sub")

    def sign_out(self, token: str) -> None:
        """Revoke the token so it can no longer be used."""
        payload = verify_token(token, secret_key=self.settings.SECRET_KEY, algorithm=self.settings.ALGORITHM)
        if payload is None or not payload.get("jti"):
            return

        if self.db.get(RevokedToken, payload["jti"]) is None:
            self.db.add(RevokedToken(jti=payload["jti"], user_id=payload.get("sub")))
            self.db.commit()

    def update_password(self, user_id: str, new_password: str) -> None:
        """Replace the user's password."""
        credential = self.get_credential(user_id)
        if credential is None:
            raise ValidationError("User not found")

        credential.hashed_password = get_password_hash(new_password)
        credential.updated_at = datetime.now(timezone.utc)
        self.db.commit()
