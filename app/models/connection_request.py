"""ConnectionRequest ORM — a directed invitation from sender to receiver.

Invariants:
    - status transitions: pending -> accepted | rejected | cancelled, exactly once
    - responded_at is NULL while pending, set on the single transition out of it
    - At most one pending request per ordered (sender_id, receiver_id) pair: the workflow
      checks first, the partial unique index settles concurrent sends. Answered requests
      repeat freely

Design Decisions:
    - Composite index (sender_id, receiver_id, status): the duplicate check and status
      lookups are all equality filters on these three columns
    - No ORM relationship to User: profiles are fetched through the identity repository
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class ConnectionRequest(Base):
    """Connection request entity — the state machine of the workflow."""
    __tablename__ = "connection_requests"
    __table_args__ = (
        Index(
            "ix_connection_requests_sender_receiver_status",
            "sender_id", "receiver_id", "status",
        ),
        Index("ix_connection_requests_receiver_status", "receiver_id", "status"),
        Index(
            "uq_connection_requests_pending_pair",
            "sender_id", "receiver_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    receiver_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    responded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
