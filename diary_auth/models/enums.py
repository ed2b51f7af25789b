"""Enums for model fields."""

from enum import Enum


class LockoutState(str, Enum):
    """Lockout state of an account, derived from its security fields."""

    ACTIVE = "active"
    WARNED = "warned"
    LOCKED = "locked"

    def allows_login_attempt(self) -> bool:
        """Check if credentials may be verified in this state."""
        return self != LockoutState.LOCKED
