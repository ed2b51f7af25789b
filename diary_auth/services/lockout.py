"""Account lockout after repeated failed logins.

An account moves between three states:

* ``ACTIVE``: no recent failures and no lockout.
* ``WARNED``: one or two failed attempts recorded.
* ``LOCKED``: ``lockout_end`` lies in the future; logins are rejected without
  checking the password.

The third consecutive failure imposes a lockout of ``LOCKOUT_DURATION`` and
resets the failure counter at that moment, so the attempt after the lockout
expires starts from a clean counter. An expired ``lockout_end`` is never
cleared proactively; it simply stops counting as locked and is cleared by the
next successful login or password reset.
"""

from datetime import datetime, timedelta

from diary_auth.models.enums import LockoutState
from diary_auth.models.user import User

MAX_FAILED_ATTEMPTS = 3
LOCKOUT_DURATION = timedelta(minutes=15)


def is_locked_out(user: User, now: datetime) -> bool:
    """Check if the account is inside an active lockout window."""
    return user.lockout_end is not None and user.lockout_end > now


def get_lockout_state(user: User, now: datetime) -> LockoutState:
    """Derive the lockout state of an account at the given time."""
    if is_locked_out(user, now):
        return LockoutState.LOCKED
    if user.failed_login_attempts:
        return LockoutState.WARNED
    return LockoutState.ACTIVE


def record_failed_attempt(user: User, now: datetime) -> bool:
    """Apply a failed verification to the account.

    Returns True if this failure imposed a new lockout.
    """
    user.failed_login_attempts = (user.failed_login_attempts or 0) + 1
    if user.failed_login_attempts < MAX_FAILED_ATTEMPTS:
        return False

    user.lockout_end = now + LOCKOUT_DURATION
    user.failed_login_attempts = 0
    return True


def clear_lockout(user: User) -> None:
    """Return the account to the active state."""
    user.failed_login_attempts = 0
    user.lockout_end = None
