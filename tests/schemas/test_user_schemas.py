"""User Schemas — registration rules, partial updates and camelCase serialization.

Invariants:
    - students need department and year, professionals need profession
    - passwords: 6 chars minimum, 72 bytes maximum
    - response payloads never expose hashed_password
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from app.models.user import User, default_preferences
from app.schemas.user import (
    PasswordUpdate, ProfileUpdate, PublicProfile, UserRegister, UserResponse,
)


def _register(**overrides):
    data = {
        "userType": "student",
        "name": "Ada",
        "email": "ada@example.com",
        "password": "secret123",
        "department": "Math",
        "year": "1",
    }
    data.update(overrides)
    return UserRegister.model_validate(data)


def test_register_accepts_camel_case_and_normalizes():
    body = _register(email="  ADA@Example.com ", name="  Ada ")
    assert body.user_type == "student"
    assert body.email == "ada@example.com"
    assert body.name == "Ada"


def test_register_rejects_bad_email():
    with pytest.raises(ValidationError):
        _register(email="not-an-email")


def test_register_student_needs_year():
    with pytest.raises(ValidationError):
        _register(year="  ")


def test_register_professional_needs_profession():
    with pytest.raises(ValidationError):
        _register(userType="professional", department=None, year=None)
    body = _register(userType="professional", profession="Nurse")
    assert body.profession == "Nurse"


@pytest.mark.parametrize("password", ["short", "é" * 37])
def test_register_password_bounds(password):
    with pytest.raises(ValidationError):
        _register(password=password)


def test_profile_update_only_tracks_sent_fields():
    body = ProfileUpdate.model_validate({"linkedin": "in/ada"})
    assert body.model_dump(exclude_unset=True) == {"linkedin": "in/ada"}


def test_profile_update_rejects_unknown_visibility():
    with pytest.raises(ValidationError):
        ProfileUpdate.model_validate({"preferences": {"profileVisibility": "friends"}})


def test_password_update_requires_new_password_length():
    with pytest.raises(ValidationError):
        PasswordUpdate.model_validate({"currentPassword": "x", "newPassword": "12345"})


def test_user_response_serializes_camel_case_without_hash():
    now = datetime.now(timezone.utc)
    user = User(
        id=uuid4(), user_type="student", name="Ada", email="ada@example.com",
        hashed_password="$2b$hash", phone="", location="", bio="", website="",
        github="", linkedin="", department="Math", year="1", interests=["graphs"],
        profession=None, preferences=default_preferences(),
        created_at=now, updated_at=now,
    )
    data = UserResponse.model_validate(user).model_dump(by_alias=True, mode="json")
    assert data["userType"] == "student"
    assert data["createdAt"]
    assert data["interests"] == ["graphs"]
    assert "hashedPassword" not in data

    public = PublicProfile.model_validate(user).model_dump(by_alias=True)
    assert set(public) == {
        "id", "name", "email", "profession", "department", "userType", "bio",
    }
