"""Connection Rules — pure decisions behind the connection request workflow.

Invariants:
    - Every function is PURE: takes already-fetched records, raises or returns, never does IO
    - Only pending requests may transition; accepted/rejected/cancelled are terminal
    - accept/reject belong to the receiver, cancel belongs to the sender
    - Status priority: connected > pending (either direction) > not_connected

Design Decisions:
    - Rules raise typed BlogNestErrors directly: the workflow shell has nothing to add
      before the global error handler turns them into responses
    - RESPONDER_ROLE table is the single source of truth for who may move a request where
"""

from collections.abc import Iterable
from uuid import UUID

from app.core.domain_types import ConnectionStatus, RequestStatus
from app.core.errors import (
    AlreadyConnectedError,
    DuplicateRequestError,
    ErrorContext,
    ForbiddenError,
    RequestNotPendingError,
    ValidationError,
)
from app.core.repository_protocols import RequestLike, UserLike


# target status -> which side of the request may perform the transition
RESPONDER_ROLE: dict[RequestStatus, str] = {
    RequestStatus.ACCEPTED: "receiver",
    RequestStatus.REJECTED: "receiver",
    RequestStatus.CANCELLED: "sender",
}

_FORBIDDEN_VERB: dict[RequestStatus, str] = {
    RequestStatus.ACCEPTED: "accept",
    RequestStatus.REJECTED: "reject",
    RequestStatus.CANCELLED: "cancel",
}


def check_can_send(
    sender_id: UUID,
    receiver_id: UUID,
    already_connected: bool,
    duplicate_pending: bool,
) -> None:
    """Raise if sender may not open a new request to receiver."""
    if sender_id == receiver_id:
        raise ValidationError(
            "Cannot send a connection request to yourself", "receiverId",
        )
    if already_connected:
        raise AlreadyConnectedError(
            ErrorContext(user_id=str(sender_id), resource_id=str(receiver_id)),
        )
    if duplicate_pending:
        raise DuplicateRequestError(
            ErrorContext(user_id=str(sender_id), resource_id=str(receiver_id)),
        )


def check_can_transition(
    request: RequestLike, actor_id: UUID, target: RequestStatus,
) -> None:
    """Raise unless actor may move request from pending to target."""
    role = RESPONDER_ROLE.get(target)
    if role is None:
        raise ValueError(f"No transition into {target.value!r}")

    owner = request.receiver_id if role == "receiver" else request.sender_id
    if owner != actor_id:
        raise ForbiddenError(
            f"Unauthorized to {_FORBIDDEN_VERB[target]} this request",
            ErrorContext(user_id=str(actor_id), resource_id=str(request.id)),
        )
    if request.status != RequestStatus.PENDING.value:
        raise RequestNotPendingError(
            request.status, ErrorContext(resource_id=str(request.id)),
        )


def resolve_status(
    viewer_id: UUID,
    has_connection: bool,
    pending: Iterable[RequestLike],
) -> ConnectionStatus:
    """Relationship as seen by viewer, given the pending requests between the pair."""
    if has_connection:
        return ConnectionStatus.CONNECTED
    for request in pending:
        if request.status != RequestStatus.PENDING.value:
            continue
        if request.sender_id == viewer_id:
            return ConnectionStatus.PENDING_SENT
        return ConnectionStatus.PENDING_RECEIVED
    return ConnectionStatus.NOT_CONNECTED


def counterpart(request: RequestLike, user_id: UUID) -> UUID:
    """The other party of a request."""
    return request.receiver_id if request.sender_id == user_id else request.sender_id


def excluded_user_ids(
    requester_id: UUID,
    peer_ids: Iterable[UUID],
    pending: Iterable[RequestLike],
) -> set[UUID]:
    """Identities never offered as new connections: self, peers, pending counterparts."""
    excluded = {requester_id}
    excluded.update(peer_ids)
    excluded.update(counterpart(r, requester_id) for r in pending)
    return excluded


def normalize_search(search: str | None) -> str | None:
    """Strip a search term; blank means no filter."""
    if search is None:
        return None
    search = search.strip()
    return search or None


def matches_filters(
    user: UserLike, search: str | None, user_type: str | None,
) -> bool:
    """Case-insensitive substring on name/profession plus exact user type."""
    if user_type and user.user_type != user_type:
        return False
    search = normalize_search(search)
    if not search:
        return True
    needle = search.lower()
    if needle in (user.name or "").lower():
        return True
    return needle in (user.profession or "").lower()
