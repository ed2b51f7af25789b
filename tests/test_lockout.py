"""Account lockout state machine tests."""

from datetime import UTC, datetime, timedelta

from diary_auth.models.enums import LockoutState
from diary_auth.models.user import User
from diary_auth.services.lockout import (
    LOCKOUT_DURATION,
    MAX_FAILED_ATTEMPTS,
    clear_lockout,
    get_lockout_state,
    is_locked_out,
    record_failed_attempt,
)

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


def make_user(**kwargs) -> User:
    fields = {"username": "bob", "failed_login_attempts": 0, "lockout_end": None}
    fields.update(kwargs)
    return User(**fields)


def test_policy_constants():
    """Test the fixed lockout policy."""
    assert MAX_FAILED_ATTEMPTS == 3
    assert LOCKOUT_DURATION == timedelta(minutes=15)


def test_new_account_is_active():
    """Test that a fresh account is active."""
    user = make_user()
    assert get_lockout_state(user, NOW) == LockoutState.ACTIVE
    assert not is_locked_out(user, NOW)
    assert get_lockout_state(user, NOW).allows_login_attempt()


def test_failures_below_threshold_warn():
    """Test that the first two failures move the account to warned."""
    user = make_user()

    assert record_failed_attempt(user, NOW) is False
    assert user.failed_login_attempts == 1
    assert get_lockout_state(user, NOW) == LockoutState.WARNED

    assert record_failed_attempt(user, NOW) is False
    assert user.failed_login_attempts == 2
    assert get_lockout_state(user, NOW) == LockoutState.WARNED
    assert user.lockout_end is None
    assert get_lockout_state(user, NOW).allows_login_attempt()


def test_third_failure_locks_and_resets_counter():
    """Test that reaching the threshold imposes a lockout and zeroes the counter."""
    user = make_user(failed_login_attempts=2)

    assert record_failed_attempt(user, NOW) is True
    assert user.lockout_end == NOW + timedelta(minutes=15)
    assert user.failed_login_attempts == 0
    assert get_lockout_state(user, NOW) == LockoutState.LOCKED
    assert not get_lockout_state(user, NOW).allows_login_attempt()


def test_lockout_expires_lazily():
    """Test that a past lockout end counts as not locked but is not cleared."""
    user = make_user(lockout_end=NOW - timedelta(seconds=1))

    assert not is_locked_out(user, NOW)
    assert get_lockout_state(user, NOW) == LockoutState.ACTIVE
    assert user.lockout_end is not None


def test_lockout_boundary():
    """Test that the lockout ends exactly at lockout_end."""
    user = make_user(lockout_end=NOW)
    assert not is_locked_out(user, NOW)
    assert is_locked_out(user, NOW - timedelta(microseconds=1))


def test_clear_lockout():
    """Test that clearing returns a locked account to active."""
    user = make_user(failed_login_attempts=2, lockout_end=NOW + timedelta(minutes=5))

    clear_lockout(user)

    assert user.failed_login_attempts == 0
    assert user.lockout_end is None
    assert get_lockout_state(user, NOW) == LockoutState.ACTIVE


def test_counter_starts_fresh_after_lockout_expires():
    """Test that the first failure after an expired lockout only warns."""
    user = make_user(failed_login_attempts=2)
    record_failed_attempt(user, NOW)

    later = NOW + LOCKOUT_DURATION + timedelta(seconds=1)
    assert record_failed_attempt(user, later) is False
    assert user.failed_login_attempts == 1
    assert get_lockout_state(user, later) == LockoutState.WARNED
