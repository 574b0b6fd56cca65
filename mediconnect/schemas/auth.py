"""
Authentication schemas for FastAPI.
"""
from typing import Optional
from pydantic import EmailStr, field_validator

from mediconnect.schemas.base import CamelModel
from mediconnect.schemas.user import Role, User, UserStatus


class SignUpRequest(CamelModel):
    """Schema for account registration."""
    email: EmailStr
    password: str
    name: str
    role: Role
    phone: Optional[str] = None
    area: Optional[str] = None
    specialization: Optional[str] = None

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters long')
        return v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name is required')
        return v.strip()

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        if v == Role.ADMIN:
            raise ValueError('Admin accounts cannot be self-registered')
        return v


class SignUpResponse(CamelModel):
    success: bool = True
    user: User
    status: UserStatus
    needs_approval: bool


class SignInRequest(CamelModel):
    """Schema for user sign-in."""
    email: EmailStr
    password: str


class SignInResponse(CamelModel):
    """Schema for access token response."""
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    user: User


class PasswordChange(CamelModel):
    """Schema for password change."""
    new_password: str

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        if len(v) < 6:
            raise ValueError('Password must be at least 6 characters long')
        return v
