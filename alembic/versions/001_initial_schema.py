"""Initial schema — users, connection_requests, connections.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_type", sa.String(20), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("location", sa.String(200), nullable=False, server_default=""),
        sa.Column("bio", sa.Text, nullable=False, server_default=""),
        sa.Column("website", sa.String(500), nullable=False, server_default=""),
        sa.Column("github", sa.String(500), nullable=False, server_default=""),
        sa.Column("linkedin", sa.String(500), nullable=False, server_default=""),
        sa.Column("preferences", sa.JSON, nullable=False),
        sa.Column("department", sa.String(200), nullable=True),
        sa.Column("year", sa.String(20), nullable=True),
        sa.Column("interests", sa.JSON, nullable=False),
        sa.Column("profession", sa.String(200), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "connection_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("sender_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("receiver_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("message", sa.Text, nullable=False, server_default=""),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_connection_requests_sender_receiver_status",
        "connection_requests", ["sender_id", "receiver_id", "status"],
    )
    op.create_index(
        "ix_connection_requests_receiver_status",
        "connection_requests", ["receiver_id", "status"],
    )
    op.create_index(
        "uq_connection_requests_pending_pair",
        "connection_requests", ["sender_id", "receiver_id"],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
        sqlite_where=sa.text("status = 'pending'"),
    )

    op.create_table(
        "connections",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("peer_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="accepted"),
        sa.Column("connected_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("owner_id", "peer_id", name="uq_connections_owner_peer"),
    )
    op.create_index("ix_connections_owner_id", "connections", ["owner_id"])


def downgrade() -> None:
    op.drop_index("ix_connections_owner_id", table_name="connections")
    op.drop_table("connections")
    op.drop_index("uq_connection_requests_pending_pair", table_name="connection_requests")
    op.drop_index("ix_connection_requests_receiver_status", table_name="connection_requests")
    op.drop_index("ix_connection_requests_sender_receiver_status", table_name="connection_requests")
    op.drop_table("connection_requests")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
