"""User Schemas — Pydantic models for account, profile and auth payloads.

Invariants:
    - JSON field names are camelCase; Python attributes are snake_case
    - No response schema exposes hashed_password
    - UserRegister cross-validates role-specific fields (student: department+year,
      professional: profession); admin is never self-registrable
    - Passwords: 6 chars minimum, 72 UTF-8 bytes maximum (bcrypt limit)

Design Decisions:
    - Literal for userType over str enum: Pydantic handles validation natively
    - field_validator for side-effect-free transforms (strip, lower-case email)
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator,
)
from pydantic.alias_generators import to_camel

from app.core.identity_rules import normalize_email


class CamelModel(BaseModel):
    """Base for every API payload: camelCase on the wire, ORM-readable."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


def _check_password(v: str) -> str:
    if len(v.encode("utf-8")) > 72:
        raise ValueError("password must be at most 72 bytes")
    return v


class UserRegister(CamelModel):
    """Registration — validates role-specific required fields."""
    user_type: Literal["student", "professional"]
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=6)
    phone: str = Field("", max_length=50)
    location: str = Field("", max_length=200)
    bio: str = Field("", max_length=5000)
    department: str | None = Field(None, max_length=200)
    year: str | None = Field(None, max_length=20)
    interests: list[str] = Field(default_factory=list)
    profession: str | None = Field(None, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return _check_password(v)

    @model_validator(mode="after")
    def validate_role_fields(self):
        if self.user_type == "student":
            if not (self.department and self.department.strip()):
                raise ValueError("students require department")
            if not (self.year and self.year.strip()):
                raise ValueError("students require year")
        elif self.user_type == "professional":
            if not (self.profession and self.profession.strip()):
                raise ValueError("professionals require profession")
        return self


class UserLogin(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class PreferencesUpdate(CamelModel):
    """Partial notification/privacy preferences."""
    email_notifications: bool | None = None
    push_notifications: bool | None = None
    weekly_digest: bool | None = None
    mentorship_requests: bool | None = None
    blog_comments: bool | None = None
    profile_visibility: Literal["public", "private"] | None = None
    show_email: bool | None = None
    show_phone: bool | None = None


class ProfileUpdate(CamelModel):
    """Partial profile update — omitted fields are left untouched."""
    name: str | None = Field(None, min_length=1, max_length=200)
    phone: str | None = Field(None, max_length=50)
    location: str | None = Field(None, max_length=200)
    bio: str | None = Field(None, max_length=5000)
    website: str | None = Field(None, max_length=500)
    github: str | None = Field(None, max_length=500)
    linkedin: str | None = Field(None, max_length=500)
    department: str | None = Field(None, max_length=200)
    year: str | None = Field(None, max_length=20)
    interests: list[str] | None = None
    profession: str | None = Field(None, max_length=200)
    preferences: PreferencesUpdate | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class PasswordUpdate(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)

    @field_validator("new_password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return _check_password(v)


class PublicProfile(CamelModel):
    """Fields any authenticated user may see about another."""
    id: UUID
    name: str
    email: str
    profession: str | None = None
    department: str | None = None
    user_type: str
    bio: str = ""


class UserResponse(PublicProfile):
    """The full account as seen by its owner."""
    phone: str = ""
    location: str = ""
    website: str = ""
    github: str = ""
    linkedin: str = ""
    year: str | None = None
    interests: list[str] = Field(default_factory=list)
    preferences: dict = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime
