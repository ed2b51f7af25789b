"""Password reset token generation."""

import secrets
from datetime import timedelta

RESET_TOKEN_BYTES = 32
RESET_TOKEN_TTL = timedelta(hours=1)


def generate_reset_token() -> str:
    """Return an unguessable URL-safe token backed by 256 random bits."""
    return secrets.token_urlsafe(RESET_TOKEN_BYTES)
