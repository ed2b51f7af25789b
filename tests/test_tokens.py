"""Reset token generation tests."""

import base64
import string

from diary_auth.services.tokens import RESET_TOKEN_BYTES, generate_reset_token

URL_SAFE_CHARS = set(string.ascii_letters + string.digits + "-_")


def test_token_carries_256_bits():
    """Test that a token decodes back to 32 random bytes."""
    token = generate_reset_token()
    padded = token + "=" * (-len(token) % 4)
    assert len(base64.urlsafe_b64decode(padded)) == RESET_TOKEN_BYTES == 32


def test_token_is_url_safe():
    """Test that tokens only use URL-safe characters."""
    token = generate_reset_token()
    assert set(token) <= URL_SAFE_CHARS


def test_tokens_do_not_repeat():
    """Test that repeated generation never collides."""
    tokens = {generate_reset_token() for _ in range(1000)}
    assert len(tokens) == 1000
