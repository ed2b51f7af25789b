"""Pydantic schemas for service requests and results."""

from diary_auth.schemas.auth import (
    AuthErrorCode,
    AuthResult,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SessionIdentity,
    UserProfile,
)
from diary_auth.schemas.profile import ProfileUpdate

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserProfile",
    "SessionIdentity",
    "AuthErrorCode",
    "AuthResult",
    "ProfileUpdate",
]
