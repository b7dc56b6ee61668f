"""Connection ORM — one directed half of an accepted, symmetric relationship.

Invariants:
    - Rows come in pairs: (owner=A, peer=B) exists iff (owner=B, peer=A) exists
    - Unique on (owner_id, peer_id)
    - status is always "accepted" once created

Design Decisions:
    - Two directed rows instead of one undirected edge: "my connections" is a single
      indexed equality query on owner_id
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Connection(Base):
    """Connection entity — owner sees peer in their connection list."""
    __tablename__ = "connections"
    __table_args__ = (
        UniqueConstraint("owner_id", "peer_id", name="uq_connections_owner_peer"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True,
    )
    peer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="accepted",
    )
    connected_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
