"""Connection Workflow — orchestrates requests and symmetric connections between identities.

Invariants:
    - Holds no state between calls: everything lives behind the injected repositories
    - Decisions delegated to core/connection_rules.py (pure); this class only fetches,
      applies, and logs
    - Accept creates both connection rows in the same repository call as the status change
    - Every listing that shows another identity attaches its public profile

Design Decisions:
    - Repositories injected through the constructor (IdentityRepository / ConnectionRepository
      protocols): the workflow runs unchanged against SQLAlchemy or in-memory fakes
    - Clock injected: respondedAt/sentAt are deterministic under test
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from app.core import connection_rules as rules
from app.core.domain_types import (
    ConnectionStatus, RequestId, RequestStatus, UserId,
)
from app.core.errors import ResourceNotFoundError
from app.core.repository_protocols import (
    ConnectionLike, ConnectionRepository, IdentityRepository, RequestLike, UserLike,
)
from app.models.connection_request import ConnectionRequest

logger = logging.getLogger(__name__)

DEFAULT_AVAILABLE_LIMIT = 20


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RequestView:
    """A request plus the profile of the party the viewer cares about."""
    request: RequestLike
    counterpart: UserLike | None


@dataclass
class ConnectionView:
    connection: ConnectionLike
    peer: UserLike


class ConnectionWorkflow:
    """Request lifecycle (pending -> accepted | rejected | cancelled) and connection queries."""

    def __init__(
        self,
        connections: ConnectionRepository,
        identities: IdentityRepository,
        clock: Callable[[], datetime] = _utcnow,
        available_limit: int = DEFAULT_AVAILABLE_LIMIT,
    ):
        self.connections = connections
        self.identities = identities
        self.clock = clock
        self.available_limit = available_limit

    # ─── Requests ────────────────────────────────────────────────

    async def send_request(
        self, sender_id: UserId, receiver_id: UserId, message: str = "",
    ) -> RequestLike:
        """Open a pending request sender -> receiver."""
        if sender_id != receiver_id and await self.identities.get(receiver_id) is None:
            raise ResourceNotFoundError("User", str(receiver_id))

        rules.check_can_send(
            sender_id,
            receiver_id,
            already_connected=await self.connections.are_connected(
                sender_id, receiver_id,
            ),
            duplicate_pending=await self.connections.find_pending(
                sender_id, receiver_id,
            ) is not None,
        )

        request = ConnectionRequest(
            id=uuid.uuid4(),
            sender_id=sender_id,
            receiver_id=receiver_id,
            status=RequestStatus.PENDING.value,
            message=message,
            sent_at=self.clock(),
            responded_at=None,
        )
        request = await self.connections.add_request(request)
        logger.info(
            "Connection request sent",
            extra={
                "user_id": str(sender_id),
                "peer_id": str(receiver_id),
                "connection_request_id": str(request.id),
            },
        )
        return request

    async def list_pending(self, receiver_id: UserId) -> list[RequestView]:
        """Pending requests addressed to receiver, newest first, with sender profiles."""
        requests = await self.connections.list_pending_received(receiver_id)
        profiles = await self.identities.get_many(r.sender_id for r in requests)
        return [RequestView(r, profiles.get(r.sender_id)) for r in requests]

    async def list_sent(self, sender_id: UserId) -> list[RequestView]:
        """Pending requests sender is still waiting on, newest first, with receiver profiles."""
        requests = await self.connections.list_pending_sent(sender_id)
        profiles = await self.identities.get_many(r.receiver_id for r in requests)
        return [RequestView(r, profiles.get(r.receiver_id)) for r in requests]

    async def accept(self, request_id: RequestId, actor_id: UserId) -> RequestLike:
        return await self._respond(request_id, actor_id, RequestStatus.ACCEPTED)

    async def reject(self, request_id: RequestId, actor_id: UserId) -> RequestLike:
        return await self._respond(request_id, actor_id, RequestStatus.REJECTED)

    async def cancel(self, request_id: RequestId, actor_id: UserId) -> RequestLike:
        return await self._respond(request_id, actor_id, RequestStatus.CANCELLED)

    async def _respond(
        self, request_id: RequestId, actor_id: UserId, target: RequestStatus,
    ) -> RequestLike:
        request = await self.connections.get_request(request_id)
        if request is None:
            raise ResourceNotFoundError("Connection request", str(request_id))

        rules.check_can_transition(request, actor_id, target)

        request = await self.connections.record_response(
            request,
            target,
            responded_at=self.clock(),
            connect=target == RequestStatus.ACCEPTED,
        )
        logger.info(
            f"Connection request {target.value}",
            extra={
                "user_id": str(actor_id),
                "connection_request_id": str(request.id),
            },
        )
        return request

    # ─── Connections ─────────────────────────────────────────────

    async def list_connections(
        self,
        owner_id: UserId,
        search: str | None = None,
        user_type: str | None = None,
    ) -> list[ConnectionView]:
        """Owner's connections, newest first, filtered on the peer's profile."""
        rows = await self.connections.list_connections(owner_id)
        profiles = await self.identities.get_many(c.peer_id for c in rows)
        views = []
        for row in rows:
            peer = profiles.get(row.peer_id)
            if peer is None:
                continue
            if rules.matches_filters(peer, search, user_type):
                views.append(ConnectionView(row, peer))
        return views

    async def remove(self, owner_id: UserId, peer_id: UserId) -> int:
        """Delete both directions of a connection. Idempotent."""
        removed = await self.connections.delete_pair(owner_id, peer_id)
        logger.info(
            "Connection removed",
            extra={"user_id": str(owner_id), "peer_id": str(peer_id)},
        )
        return removed

    async def status(self, viewer_id: UserId, other_id: UserId) -> ConnectionStatus:
        if await self.connections.has_connection(viewer_id, other_id):
            return ConnectionStatus.CONNECTED
        pending = await self.connections.pending_between(viewer_id, other_id)
        return rules.resolve_status(viewer_id, False, pending)

    async def list_available(
        self,
        requester_id: UserId,
        search: str | None = None,
        user_type: str | None = None,
    ) -> list[UserLike]:
        """Identities requester could send a request to, capped at available_limit."""
        rows = await self.connections.list_connections(requester_id)
        pending = await self.connections.list_pending_involving(requester_id)
        excluded: set[UUID] = rules.excluded_user_ids(
            requester_id, (c.peer_id for c in rows), pending,
        )
        return await self.identities.search(
            exclude_ids=excluded,
            search=rules.normalize_search(search),
            user_type=user_type or None,
            limit=self.available_limit,
        )
