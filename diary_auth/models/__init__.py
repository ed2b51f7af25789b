"""SQLAlchemy models."""

from diary_auth.models.enums import LockoutState
from diary_auth.models.user import User

__all__ = [
    "User",
    "LockoutState",
]
