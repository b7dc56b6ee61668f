"""User ORM — persists an identity: credentials, role tag, and profile.

Invariants:
    - email is unique and always stored lower-cased and trimmed
    - hashed_password is a bcrypt hash, never serialized by any schema
    - user_type is one of UserType (student, professional, admin)
    - created_at set on insert; updated_at refreshed on every ORM update

Design Decisions:
    - JSON columns for interests/preferences: small, always read with the user, never queried
    - Student and professional fields on one table: role only changes which are required
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_preferences() -> dict:
    return {
        "emailNotifications": True,
        "pushNotifications": False,
        "weeklyDigest": True,
        "mentorshipRequests": True,
        "blogComments": True,
        "profileVisibility": "public",
        "showEmail": False,
        "showPhone": False,
    }


class User(Base):
    """Identity entity — owner of requests and connections."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_type: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    # Profile
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    location: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    website: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    github: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    linkedin: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    preferences: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=default_preferences,
    )

    # Student-specific
    department: Mapped[str | None] = mapped_column(String(200), nullable=True)
    year: Mapped[str | None] = mapped_column(String(20), nullable=True)
    interests: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Professional-specific
    profession: Mapped[str | None] = mapped_column(String(200), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )
