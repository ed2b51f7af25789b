"""Delivery of password reset tokens."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class ResetTokenNotifier(Protocol):
    """Delivers a freshly issued reset token to the account's email address."""

    def send_password_reset(self, email: str, token: str) -> None: ...


class LoggingResetNotifier:
    """Notifier used when no delivery channel is configured.

    Records that a reset was requested. The token itself is never logged.
    """

    def send_password_reset(self, email: str, token: str) -> None:
        logger.info("Password reset token issued for %s; no delivery channel configured", email)
