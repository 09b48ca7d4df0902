"""Password hashing for admin accounts (bcrypt)."""

import base64
import hashlib

import bcrypt

from loyalty_pro.config import get_settings


def _to_bcrypt_secret(password: str) -> bytes:
    """
    bcrypt only uses the first 72 BYTES of its input.
    Feed it the base64 SHA-256 digest (44 bytes) so every byte of the
    password takes part in the comparison.
    """
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt hash as a UTF-8 string."""
    salt = bcrypt.gensalt(rounds=rounds or get_settings().bcrypt_rounds)
    return bcrypt.hashpw(_to_bcrypt_secret(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    A malformed stored hash never verifies.
    """
    try:
        return bcrypt.checkpw(_to_bcrypt_secret(password), password_hash.encode("utf-8"))
    except ValueError:
        return False
