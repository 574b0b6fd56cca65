"""
Identity provider tables: login credentials and revoked access tokens.
"""
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from mediconnect.db.base import Base


class Credential(Base):
    """Email/password credential owned by the identity provider."""
    __tablename__ = "credentials"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    user_metadata = Column(JSON)  # name and role given at signup

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_sign_in_at = Column(DateTime(timezone=True))

    def __repr__(self):
        return f"<Credential(id='{self.id}', email='{self.email}')>"


class RevokedToken(Base):
    """Access token invalidated by sign-out."""
    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    user_id = Column(String(36), index=True)
    revoked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<RevokedToken(jti='{self.jti}')>"
