"""User model."""

from sqlalchemy import CheckConstraint, Column, Integer, String

from diary_auth.database import Base
from diary_auth.models.mixins import TimestampMixin
from diary_auth.models.types import UTCDateTime


class User(Base, TimestampMixin):
    """User account with credentials, profile and lockout state."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("failed_login_attempts >= 0", name="ck_users_failed_attempts_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    profile_picture_path = Column(String(500), nullable=False, default="")

    # Security
    failed_login_attempts = Column(Integer, nullable=False, default=0)
    lockout_end = Column(UTCDateTime, nullable=True)
    password_reset_token = Column(String(255), nullable=True, unique=True, index=True)
    password_reset_token_expiry = Column(UTCDateTime, nullable=True)

    last_login_at = Column(UTCDateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
