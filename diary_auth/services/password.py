"""Password hashing and verification.

New hashes use ``bcrypt_sha256``: the password is run through HMAC-SHA256
before bcrypt, so every byte counts and nothing is lost to bcrypt's 72 byte
limit. Two older formats are still accepted and are deprecated, so
``verify_and_update`` hands back a ``bcrypt_sha256`` replacement the first
time such a password verifies:

* plain ``bcrypt`` digests, which only cover the first 72 bytes;
* digests written by the first release of the diary (unsalted single-pass
  SHA-256, base64 encoded) through the ``legacy_sha256`` scheme.
"""

import base64
import hashlib
import string

from passlib.context import CryptContext
from passlib.utils import handlers as uh

from diary_auth.config import get_settings

settings = get_settings()

_LEGACY_DIGEST_CHARS = string.ascii_letters + string.digits + "+/="


def legacy_sha256_digest(password: str) -> str:
    """Unsalted SHA-256 digest in the legacy base64 text form."""
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


class LegacySha256(uh.StaticHandler):
    """passlib handler for legacy base64 SHA-256 digests."""

    name = "legacy_sha256"
    checksum_size = 44
    checksum_chars = _LEGACY_DIGEST_CHARS

    def _calc_checksum(self, secret):
        if isinstance(secret, bytes):
            secret = secret.decode("utf-8")
        return legacy_sha256_digest(secret)


# Password hashing context; the first scheme is used for new hashes
pwd_context = CryptContext(
    schemes=["bcrypt_sha256", "bcrypt", LegacySha256],
    deprecated="auto",
    bcrypt_sha256__rounds=settings.bcrypt_rounds,
    bcrypt__rounds=settings.bcrypt_rounds,
)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash in constant time.

    Digests in an unrecognized format never verify.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def verify_and_update(plain_password: str, hashed_password: str) -> tuple[bool, str | None]:
    """Verify a password and return a replacement hash if the stored one is outdated."""
    try:
        return pwd_context.verify_and_update(plain_password, hashed_password)
    except ValueError:
        return False, None


def dummy_verify() -> None:
    """Burn one verification's worth of time for a user that does not exist."""
    pwd_context.dummy_verify()


def needs_rehash(hashed_password: str) -> bool:
    """Check if a stored hash uses a deprecated scheme or settings."""
    try:
        return pwd_context.needs_update(hashed_password)
    except ValueError:
        return False
