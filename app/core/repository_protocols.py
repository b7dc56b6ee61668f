"""Boundary Protocols — contracts between core/services and persistence.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by the shell via dependency injection
      (SQLAlchemy in services/, in-memory fakes in tests)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - *Like record protocols instead of ORM imports: the workflow and its rules see
      attributes only, so fakes can hand back plain objects
    - Multi-row writes are single repository calls (record_response, purge_user) so the
      implementation can make them one transaction
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol
from uuid import UUID

from app.core.domain_types import ConnectionId, UserId, RequestId, RequestStatus


class UserLike(Protocol):
    """Structural contract for identity records."""
    id: UUID
    user_type: str
    name: str
    email: str
    hashed_password: str
    profession: str | None
    department: str | None
    bio: str
    preferences: dict


class RequestLike(Protocol):
    """Structural contract for connection request records."""
    id: RequestId
    sender_id: UUID
    receiver_id: UUID
    status: str
    message: str
    sent_at: datetime
    responded_at: datetime | None


class ConnectionLike(Protocol):
    """Structural contract for one directed connection row."""
    id: ConnectionId
    owner_id: UUID
    peer_id: UUID
    status: str
    connected_at: datetime


class IdentityRepository(Protocol):
    """Contract for identity persistence — implemented by shell."""
    async def get(self, user_id: UserId) -> UserLike | None: ...
    async def get_by_email(self, email: str) -> UserLike | None: ...
    async def get_many(self, user_ids: Iterable[UserId]) -> dict[UUID, UserLike]: ...
    async def add(self, user: UserLike) -> UserLike: ...
    async def save(self, user: UserLike) -> UserLike: ...
    async def delete(self, user: UserLike) -> None: ...
    async def list_by_type(self, user_type: str) -> list[UserLike]: ...
    async def search(
        self,
        exclude_ids: Iterable[UserId],
        search: str | None,
        user_type: str | None,
        limit: int,
    ) -> list[UserLike]: ...


class ConnectionRepository(Protocol):
    """Contract for request/connection persistence — implemented by shell."""
    async def are_connected(self, a: UserId, b: UserId) -> bool: ...
    async def has_connection(self, owner: UserId, peer: UserId) -> bool: ...
    async def find_pending(self, sender: UserId, receiver: UserId) -> RequestLike | None: ...
    async def pending_between(self, a: UserId, b: UserId) -> list[RequestLike]: ...
    async def get_request(self, request_id: RequestId) -> RequestLike | None: ...
    async def add_request(self, request: RequestLike) -> RequestLike: ...
    async def list_pending_received(self, receiver: UserId) -> list[RequestLike]: ...
    async def list_pending_sent(self, sender: UserId) -> list[RequestLike]: ...
    async def list_pending_involving(self, user: UserId) -> list[RequestLike]: ...
    async def list_connections(self, owner: UserId) -> list[ConnectionLike]: ...
    async def record_response(
        self,
        request: RequestLike,
        status: RequestStatus,
        responded_at: datetime,
        connect: bool,
    ) -> RequestLike: ...
    async def delete_pair(self, a: UserId, b: UserId) -> int: ...
    async def purge_user(self, user: UserId) -> None: ...
