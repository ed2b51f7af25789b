"""Authentication schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """User registration request."""

    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    confirm_password: str = Field(..., max_length=128)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class LoginRequest(BaseModel):
    """User login request."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=128)


class ForgotPasswordRequest(BaseModel):
    """Request a password reset token for an email address."""

    email: EmailStr = Field(..., max_length=255)


class ResetPasswordRequest(BaseModel):
    """Exchange a reset token for a new password."""

    token: str = Field(..., max_length=255)
    new_password: str = Field(..., min_length=6, max_length=128)


class UserProfile(BaseModel):
    """Profile view of a user. Never carries credential or security fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    profile_picture_path: str
    created_at: datetime


class SessionIdentity(BaseModel):
    """Identity the caller keeps in its own session after a successful login."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str


class AuthErrorCode(str, Enum):
    """Expected failure kinds reported in an AuthResult."""

    VALIDATION_ERROR = "validation_error"
    PASSWORD_MISMATCH = "password_mismatch"
    DUPLICATE_CREDENTIAL = "duplicate_credential"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_LOCKED = "account_locked"
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    NOT_FOUND = "not_found"


class AuthResult(BaseModel):
    """Outcome of an auth or profile operation."""

    success: bool
    message: str
    error: AuthErrorCode | None = None
    profile: UserProfile | None = None
    identity: SessionIdentity | None = None
    lockout_end: datetime | None = None

    @classmethod
    def ok(cls, message: str, **kwargs) -> "AuthResult":
        return cls(success=True, message=message, **kwargs)

    @classmethod
    def fail(cls, error: AuthErrorCode, message: str, **kwargs) -> "AuthResult":
        return cls(success=False, message=message, error=error, **kwargs)
