"""Security Primitives — bcrypt hashing and access-token round trip.

Tests cover:
    - hash_password never stores the plain text and verifies correctly
    - verify_password returns False for malformed hashes
    - create/decode round trip; expired and tampered tokens raise AuthenticationError
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from app.config import get_settings
from app.core.errors import AuthenticationError
from app.infrastructure.security import (
    create_access_token, decode_access_token, hash_password, verify_password,
)


def test_hash_and_verify():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_hashes_are_salted():
    assert hash_password("secret123") != hash_password("secret123")


def test_verify_against_malformed_hash_is_false():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


def test_token_round_trip_carries_role():
    user_id = uuid4()
    token = create_access_token(user_id, "professional")
    assert decode_access_token(token) == user_id

    settings = get_settings()
    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert claims["role"] == "professional"
    assert claims["exp"] > claims["iat"]


def test_expired_token():
    settings = get_settings()
    issued = datetime.now(timezone.utc) - timedelta(days=10)
    token = jwt.encode(
        {"sub": str(uuid4()), "iat": issued, "exp": issued + timedelta(days=7)},
        settings.jwt_secret, algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(AuthenticationError) as exc:
        decode_access_token(token)
    assert exc.value.code == "TOKEN_EXPIRED"


def test_tampered_token():
    signed = create_access_token(uuid4(), "student")
    unsigned, _ = signed.rsplit(".", 1)
    with pytest.raises(AuthenticationError) as exc:
        decode_access_token(f"{unsigned}.{'x' * 43}")
    assert exc.value.code == "INVALID_TOKEN"


def test_token_without_uuid_subject():
    settings = get_settings()
    token = jwt.encode(
        {"sub": "42", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        settings.jwt_secret, algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(AuthenticationError) as exc:
        decode_access_token(token)
    assert exc.value.code == "INVALID_TOKEN"
