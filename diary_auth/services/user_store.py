"""User record persistence."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from diary_auth.models.user import User

logger = logging.getLogger(__name__)


class StorageFailure(Exception):
    """The user store could not complete a read or write."""


class DuplicateUserError(Exception):
    """A write violated the username or email uniqueness constraint."""


class UserStore:
    """Reads and writes user records on a SQLAlchemy session.

    Lookups return None when no record matches. Database errors are rolled
    back and raised as StorageFailure, except uniqueness violations on write,
    which are raised as DuplicateUserError.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, user_id: int) -> User | None:
        return self._first(self.db.query(User).filter(User.id == user_id))

    def find_by_username(self, username: str, for_update: bool = False) -> User | None:
        """Get a user by username, optionally locking the row until commit."""
        query = self.db.query(User).filter(User.username == username)
        if for_update:
            query = query.with_for_update()
        return self._first(query)

    def find_by_email(self, email: str) -> User | None:
        return self._first(self.db.query(User).filter(User.email == email))

    def find_by_username_or_email(self, username: str, email: str) -> User | None:
        return self._first(
            self.db.query(User).filter((User.username == username) | (User.email == email))
        )

    def find_by_reset_token(self, token: str) -> User | None:
        """Get the user holding a reset token. Empty tokens never match."""
        if not token:
            return None
        return self._first(
            self.db.query(User).filter(User.password_reset_token == token).with_for_update()
        )

    def email_in_use_by_other(self, email: str, user_id: int) -> bool:
        """Check if another user already owns an email address."""
        query = self.db.query(User.id).filter(User.email == email, User.id != user_id)
        return self._first(query) is not None

    def insert(self, user: User) -> User:
        """Add a new user and commit."""
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def save(self, user: User) -> User:
        """Commit pending changes to an existing user."""
        self.db.add(user)
        self._commit()
        return user

    def discard(self) -> None:
        """End the current unit of work without writing anything."""
        self.db.rollback()

    def _first(self, query):
        try:
            return query.first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("User lookup failed")
            raise StorageFailure("User lookup failed") from exc

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateUserError("Username or email already exists") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("User write failed")
            raise StorageFailure("User write failed") from exc
