"""Authentication service: registration, login with lockout, password reset and profile."""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from diary_auth.models.mixins import utc_now
from diary_auth.models.user import User
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
from diary_auth.services import lockout
from diary_auth.services.notifications import LoggingResetNotifier, ResetTokenNotifier
from diary_auth.services.password import dummy_verify, get_password_hash, verify_and_update
from diary_auth.services.tokens import RESET_TOKEN_TTL, generate_reset_token
from diary_auth.services.user_store import DuplicateUserError, UserStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."
FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a reset link has been sent."


class AuthService:
    """Service for account registration, authentication and profile updates.

    Every operation re-reads the user record, commits at most once and
    reports expected failures through AuthResult. Only StorageFailure is
    raised.
    """

    def __init__(
        self,
        db: Session,
        notifier: ResetTokenNotifier | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = UserStore(db)
        self.notifier = notifier or LoggingResetNotifier()
        self.clock = clock or utc_now

    def register(self, data: RegisterRequest) -> AuthResult:
        """Create an account. The new user is not logged in."""
        if data.password != data.confirm_password:
            return AuthResult.fail(AuthErrorCode.PASSWORD_MISMATCH, "Passwords do not match.")
        if not data.password.strip():
            return AuthResult.fail(AuthErrorCode.VALIDATION_ERROR, "Password must not be blank.")

        if self.store.find_by_username_or_email(data.username, data.email):
            return AuthResult.fail(
                AuthErrorCode.DUPLICATE_CREDENTIAL, "Username or email already exists."
            )

        now = self.clock()
        user = User(
            username=data.username,
            email=data.email,
            password_hash=get_password_hash(data.password),
            first_name=data.first_name or "",
            last_name=data.last_name or "",
            profile_picture_path="",
            failed_login_attempts=0,
            lockout_end=None,
            password_reset_token=None,
            password_reset_token_expiry=None,
            created_at=now,
            last_login_at=now,
        )
        try:
            user = self.store.insert(user)
        except DuplicateUserError:
            # Lost a race with a concurrent registration
            return AuthResult.fail(
                AuthErrorCode.DUPLICATE_CREDENTIAL, "Username or email already exists."
            )

        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return AuthResult.ok("User registered successfully.")

    def login(self, data: LoginRequest) -> AuthResult:
        """Authenticate a user, applying the lockout policy."""
        user = self.store.find_by_username(data.username, for_update=True)
        if user is None:
            # Spend the same hashing time as a real verification
            dummy_verify()
            self.store.discard()
            logger.warning("Login failed for unknown username")
            return AuthResult.fail(AuthErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        now = self.clock()
        if not lockout.get_lockout_state(user, now).allows_login_attempt():
            user_id, lockout_end = user.id, user.lockout_end
            # Release the row lock without touching the record
            self.store.discard()
            logger.warning("Login rejected for locked user id=%s", user_id)
            return AuthResult.fail(
                AuthErrorCode.ACCOUNT_LOCKED,
                f"Account locked until {lockout_end:%Y-%m-%d %H:%M:%S} UTC.",
                lockout_end=lockout_end,
            )

        valid, new_hash = verify_and_update(data.password, user.password_hash)
        if not valid:
            newly_locked = lockout.record_failed_attempt(user, now)
            self.store.save(user)
            if newly_locked:
                logger.warning("User id=%s locked until %s", user.id, user.lockout_end.isoformat())
                return AuthResult.fail(
                    AuthErrorCode.ACCOUNT_LOCKED,
                    f"{INVALID_CREDENTIALS_MESSAGE} Account locked until "
                    f"{user.lockout_end:%Y-%m-%d %H:%M:%S} UTC.",
                    lockout_end=user.lockout_end,
                )
            logger.warning(
                "Failed login for user id=%s (%d/%d)",
                user.id,
                user.failed_login_attempts,
                lockout.MAX_FAILED_ATTEMPTS,
            )
            return AuthResult.fail(AuthErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        lockout.clear_lockout(user)
        user.last_login_at = now
        if new_hash:
            user.password_hash = new_hash
            logger.info("Upgraded password hash for user id=%s", user.id)
        self.store.save(user)

        logger.info("User id=%s logged in", user.id)
        return AuthResult.ok(
            "Login successful.",
            profile=UserProfile.model_validate(user),
            identity=SessionIdentity(user_id=user.id, username=user.username),
        )

    def forgot_password(self, data: ForgotPasswordRequest) -> AuthResult:
        """Issue a reset token if the email is registered.

        The result is the same whether or not the email exists.
        """
        user = self.store.find_by_email(data.email)
        if user is None:
            self.store.discard()
            return AuthResult.ok(FORGOT_PASSWORD_MESSAGE)

        token = generate_reset_token()
        user.password_reset_token = token
        user.password_reset_token_expiry = self.clock() + RESET_TOKEN_TTL
        self.store.save(user)
        logger.info("Password reset token issued for user id=%s", user.id)

        try:
            self.notifier.send_password_reset(user.email, token)
        except Exception:
            logger.exception("Failed to deliver password reset for user id=%s", user.id)

        return AuthResult.ok(FORGOT_PASSWORD_MESSAGE)

    def reset_password(self, data: ResetPasswordRequest) -> AuthResult:
        """Set a new password using a reset token. Also lifts any lockout."""
        user = self.store.find_by_reset_token(data.token)
        if user is None:
            self.store.discard()
            return AuthResult.fail(AuthErrorCode.INVALID_TOKEN, "Invalid or expired token.")

        expiry = user.password_reset_token_expiry
        if expiry is None or expiry <= self.clock():
            self.store.discard()
            return AuthResult.fail(AuthErrorCode.TOKEN_EXPIRED, "Token has expired.")

        if not data.new_password.strip():
            self.store.discard()
            return AuthResult.fail(AuthErrorCode.VALIDATION_ERROR, "Password must not be blank.")

        user.password_hash = get_password_hash(data.new_password)
        user.password_reset_token = None
        user.password_reset_token_expiry = None
        lockout.clear_lockout(user)
        self.store.save(user)

        logger.info("Password reset for user id=%s", user.id)
        return AuthResult.ok("Password has been reset.")

    def get_profile(self, user_id: int) -> AuthResult:
        user = self.store.find_by_id(user_id)
        if user is None:
            return AuthResult.fail(AuthErrorCode.NOT_FOUND, "User not found.")
        return AuthResult.ok("Profile loaded.", profile=UserProfile.model_validate(user))

    def update_profile(self, user_id: int, data: ProfileUpdate) -> AuthResult:
        """Merge the supplied profile fields into the user record."""
        user = self.store.find_by_id(user_id)
        if user is None:
            return AuthResult.fail(AuthErrorCode.NOT_FOUND, "User not found.")

        if data.email and data.email != user.email:
            if self.store.email_in_use_by_other(data.email, user_id):
                return AuthResult.fail(
                    AuthErrorCode.DUPLICATE_CREDENTIAL, "Email is already in use."
                )
            user.email = data.email
        if data.first_name:
            user.first_name = data.first_name
        if data.last_name:
            user.last_name = data.last_name

        try:
            self.store.save(user)
        except DuplicateUserError:
            return AuthResult.fail(AuthErrorCode.DUPLICATE_CREDENTIAL, "Email is already in use.")

        return AuthResult.ok("Profile updated.", profile=UserProfile.model_validate(user))

    def update_profile_picture(self, user_id: int, image_path: str | None) -> AuthResult:
        """Store an already validated profile picture path."""
        user = self.store.find_by_id(user_id)
        if user is None:
            return AuthResult.fail(AuthErrorCode.NOT_FOUND, "User not found.")

        user.profile_picture_path = image_path or ""
        self.store.save(user)
        return AuthResult.ok("Profile picture updated.", profile=UserProfile.model_validate(user))
