"""Security Primitives — bcrypt password hashing and HS256 access tokens.

Invariants:
    - Plain passwords never leave this module except as bcrypt hashes
    - Tokens carry sub (user id), role (user type), iat and exp
    - Every PyJWT failure is mapped to AuthenticationError before returning

Design Decisions:
    - bcrypt directly rather than a passlib wrapper: one scheme, no deprecated shims
    - Cost factor from settings so tests can drop it to the bcrypt minimum
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt

from app.config import get_settings
from app.core.errors import AuthenticationError


def hash_password(password: str) -> str:
    """Hash a password with a fresh salt."""
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Constant-time comparison of a candidate password against a stored hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash, or a password over bcrypt's 72-byte limit
        return False


def create_access_token(user_id: UUID, role: str) -> str:
    """Create a signed access token for user_id."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=settings.jwt_expires_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID:
    """Verify token and return the user id it was issued for.

    Raises:
        AuthenticationError: expired, badly signed, or malformed token.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(
            "Token expired. Please log in again.", "TOKEN_EXPIRED",
        )
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token", "INVALID_TOKEN")

    try:
        return UUID(str(payload["sub"]))
    except (KeyError, ValueError):
        raise AuthenticationError("Invalid token", "INVALID_TOKEN")
