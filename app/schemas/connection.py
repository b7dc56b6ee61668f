"""Connection Schemas — request bodies and response shapes for the connection routes.

Invariants:
    - receiverId / requestId / connectedUserId are required UUIDs; a missing or malformed
      id fails validation before the workflow runs
    - message defaults to "" (never null in storage)
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.user import CamelModel, PublicProfile


class SendRequestBody(CamelModel):
    receiver_id: UUID
    message: str | None = Field(None, max_length=1000, validate_default=True)

    @field_validator("message")
    @classmethod
    def default_message(cls, v: str | None) -> str:
        return (v or "").strip()


class RequestActionBody(CamelModel):
    """Body shared by accept / reject / cancel."""
    request_id: UUID


class RemoveConnectionBody(CamelModel):
    connected_user_id: UUID


class ConnectionRequestOut(CamelModel):
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    status: str
    message: str = ""
    sent_at: datetime
    responded_at: datetime | None = None


class PendingRequestOut(ConnectionRequestOut):
    sender: PublicProfile | None = None


class SentRequestOut(ConnectionRequestOut):
    receiver: PublicProfile | None = None


class ConnectionOut(CamelModel):
    id: UUID
    owner_id: UUID
    peer_id: UUID
    status: str
    connected_at: datetime
    peer: PublicProfile | None = None
