"""Security utilities: password hashing, session tokens and header parsing."""

import secrets

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

_password_hasher = PasswordHasher(type=Type.ID)


def hash_password(password: str) -> str:
    """Hash a password with argon2id.

    The returned string embeds the algorithm parameters and a random salt.
    """
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored argon2 hash.

    Returns:
        True on match, False on mismatch or an unreadable hash
    """
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def generate_session_token(length: int = 32) -> str:
    """Generate an opaque, unguessable session token.

    Args:
        length: Number of random bytes (default 32, 256 bits of entropy)

    Returns:
        URL-safe base64 encoded token
    """
    return secrets.token_urlsafe(length)


def parse_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def redact_token(token: str) -> str:
    """Shorten a token for log output."""
    return f"{token[:6]}..." if len(token) > 6 else "***"
