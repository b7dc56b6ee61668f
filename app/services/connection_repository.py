"""SQL Connection Repository — SQLAlchemy implementation of ConnectionRepository.

Invariants:
    - record_response() writes the status change and BOTH connection rows in one commit;
      a failure rolls back all of it (no half-created pairs)
    - The status change is a compare-and-set on status = 'pending': of two racing
      responses exactly one commits, the other gets RequestNotPendingError
    - A unique violation on (owner_id, peer_id) during accept surfaces as AlreadyConnectedError
    - A second pending row for the same (sender_id, receiver_id) violates the partial
      unique index and surfaces as DuplicateRequestError
    - purge_user() only flushes; the identity delete that follows commits the cascade
    - Listings are ordered newest first (sent_at / connected_at)
"""

import logging
from datetime import datetime

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import RequestId, RequestStatus, UserId
from app.core.errors import (
    AlreadyConnectedError, DuplicateRequestError, ErrorContext,
    RequestNotPendingError, ResourceNotFoundError,
)
from app.models.connection import Connection
from app.models.connection_request import ConnectionRequest

logger = logging.getLogger(__name__)

_PENDING = RequestStatus.PENDING.value


def _pair_filter(a: UserId, b: UserId):
    return or_(
        and_(Connection.owner_id == a, Connection.peer_id == b),
        and_(Connection.owner_id == b, Connection.peer_id == a),
    )


class SqlConnectionRepository:
    """Request and connection persistence over one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def are_connected(self, a: UserId, b: UserId) -> bool:
        result = await self.db.execute(
            select(Connection.id).where(_pair_filter(a, b)).limit(1),
        )
        return result.first() is not None

    async def has_connection(self, owner: UserId, peer: UserId) -> bool:
        result = await self.db.execute(
            select(Connection.id)
            .where(Connection.owner_id == owner, Connection.peer_id == peer)
            .limit(1),
        )
        return result.first() is not None

    async def find_pending(
        self, sender: UserId, receiver: UserId,
    ) -> ConnectionRequest | None:
        result = await self.db.execute(
            select(ConnectionRequest)
            .where(
                ConnectionRequest.sender_id == sender,
                ConnectionRequest.receiver_id == receiver,
                ConnectionRequest.status == _PENDING,
            )
            .limit(1),
        )
        return result.scalar_one_or_none()

    async def pending_between(
        self, a: UserId, b: UserId,
    ) -> list[ConnectionRequest]:
        result = await self.db.execute(
            select(ConnectionRequest)
            .where(
                ConnectionRequest.status == _PENDING,
                or_(
                    and_(
                        ConnectionRequest.sender_id == a,
                        ConnectionRequest.receiver_id == b,
                    ),
                    and_(
                        ConnectionRequest.sender_id == b,
                        ConnectionRequest.receiver_id == a,
                    ),
                ),
            )
            .order_by(ConnectionRequest.sent_at.desc()),
        )
        return list(result.scalars().all())

    async def get_request(self, request_id: RequestId) -> ConnectionRequest | None:
        return await self.db.get(ConnectionRequest, request_id)

    async def add_request(self, request: ConnectionRequest) -> ConnectionRequest:
        sender_id, receiver_id = str(request.sender_id), str(request.receiver_id)
        self.db.add(request)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                "Concurrent send lost the race on pending request",
                extra={"user_id": sender_id, "peer_id": receiver_id},
            )
            raise DuplicateRequestError(ErrorContext(user_id=sender_id))
        await self.db.refresh(request)
        return request

    async def list_pending_received(
        self, receiver: UserId,
    ) -> list[ConnectionRequest]:
        result = await self.db.execute(
            select(ConnectionRequest)
            .where(
                ConnectionRequest.receiver_id == receiver,
                ConnectionRequest.status == _PENDING,
            )
            .order_by(ConnectionRequest.sent_at.desc()),
        )
        return list(result.scalars().all())

    async def list_pending_sent(self, sender: UserId) -> list[ConnectionRequest]:
        result = await self.db.execute(
            select(ConnectionRequest)
            .where(
                ConnectionRequest.sender_id == sender,
                ConnectionRequest.status == _PENDING,
            )
            .order_by(ConnectionRequest.sent_at.desc()),
        )
        return list(result.scalars().all())

    async def list_pending_involving(
        self, user: UserId,
    ) -> list[ConnectionRequest]:
        result = await self.db.execute(
            select(ConnectionRequest).where(
                ConnectionRequest.status == _PENDING,
                or_(
                    ConnectionRequest.sender_id == user,
                    ConnectionRequest.receiver_id == user,
                ),
            ),
        )
        return list(result.scalars().all())

    async def list_connections(self, owner: UserId) -> list[Connection]:
        result = await self.db.execute(
            select(Connection)
            .where(Connection.owner_id == owner)
            .order_by(Connection.connected_at.desc()),
        )
        return list(result.scalars().all())

    async def record_response(
        self,
        request: ConnectionRequest,
        status: RequestStatus,
        responded_at: datetime,
        connect: bool,
    ) -> ConnectionRequest:
        """Apply a transition; when connect, also create whichever pair rows are missing."""
        key = request.id
        request_id = str(key)
        result = await self.db.execute(
            update(ConnectionRequest)
            .where(
                ConnectionRequest.id == key,
                ConnectionRequest.status == _PENDING,
            )
            .values(status=status.value, responded_at=responded_at)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount != 1:
            await self.db.rollback()
            await self._raise_not_pending(key, request_id)

        if connect:
            pairs = (
                (request.sender_id, request.receiver_id),
                (request.receiver_id, request.sender_id),
            )
            # existence checks first: no pending insert is autoflushed outside the try
            missing = [p for p in pairs if not await self.has_connection(*p)]
            for owner, peer in missing:
                self.db.add(Connection(
                    owner_id=owner, peer_id=peer,
                    status=RequestStatus.ACCEPTED.value,
                    connected_at=responded_at,
                ))

        try:
            await self.db.commit()
        except IntegrityError:
            # rollback expires the request; only the captured id is safe to read
            await self.db.rollback()
            logger.warning(
                "Concurrent accept lost the race on connection pair",
                extra={"connection_request_id": request_id},
            )
            raise AlreadyConnectedError(ErrorContext(resource_id=request_id))
        await self.db.refresh(request)
        return request

    async def _raise_not_pending(self, key, request_id: str) -> None:
        current = await self.db.get(ConnectionRequest, key, populate_existing=True)
        if current is None:
            raise ResourceNotFoundError("Connection request", request_id)
        logger.warning(
            f"Response to {current.status} connection request refused",
            extra={"connection_request_id": request_id},
        )
        raise RequestNotPendingError(
            current.status, ErrorContext(resource_id=request_id),
        )

    async def delete_pair(self, a: UserId, b: UserId) -> int:
        result = await self.db.execute(delete(Connection).where(_pair_filter(a, b)))
        await self.db.commit()
        return result.rowcount or 0

    async def purge_user(self, user: UserId) -> None:
        await self.db.execute(
            delete(Connection).where(
                or_(Connection.owner_id == user, Connection.peer_id == user),
            ),
        )
        await self.db.execute(
            delete(ConnectionRequest).where(
                or_(
                    ConnectionRequest.sender_id == user,
                    ConnectionRequest.receiver_id == user,
                ),
            ),
        )
        await self.db.flush()
