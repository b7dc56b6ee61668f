"""In-memory repositories for testing ConnectionWorkflow without a database.

Mirror the SQL repositories' observable behavior: newest-first ordering,
symmetric pair creation on accept, idempotent pair deletion.
"""

import uuid
from datetime import datetime, timedelta, timezone

from app.core.connection_rules import matches_filters
from app.core.domain_types import RequestStatus
from app.models.connection import Connection
from app.models.user import User, default_preferences

DEFAULT_PASSWORD = "secret123"


def make_user(name: str, user_type: str = "student", **fields) -> User:
    """Transient User with every column the workflow reads."""
    return User(
        id=fields.pop("id", uuid.uuid4()),
        user_type=user_type,
        name=name,
        email=fields.pop("email", f"{name.lower().replace(' ', '.')}@example.com"),
        hashed_password=fields.pop("hashed_password", "not-a-real-hash"),
        bio=fields.pop("bio", ""),
        profession=fields.pop("profession", None),
        department=fields.pop("department", None),
        preferences=default_preferences(),
        interests=[],
        **fields,
    )


class FakeIdentityRepository:
    def __init__(self, *users: User):
        self.users: dict[uuid.UUID, User] = {u.id: u for u in users}

    async def get(self, user_id):
        return self.users.get(user_id)

    async def get_by_email(self, email):
        email = email.strip().lower()
        return next((u for u in self.users.values() if u.email == email), None)

    async def get_many(self, user_ids):
        return {i: self.users[i] for i in set(user_ids) if i in self.users}

    async def add(self, user):
        self.users[user.id] = user
        return user

    async def save(self, user):
        return user

    async def delete(self, user):
        self.users.pop(user.id, None)

    async def list_by_type(self, user_type):
        return sorted(
            (u for u in self.users.values() if u.user_type == user_type),
            key=lambda u: u.name,
        )

    async def search(self, exclude_ids, search, user_type, limit):
        excluded = set(exclude_ids)
        found = [
            u for u in sorted(self.users.values(), key=lambda u: u.name)
            if u.id not in excluded and matches_filters(u, search, user_type)
        ]
        return found[:limit]


class FakeConnectionRepository:
    def __init__(self):
        self.requests: list = []
        self.connections: list[Connection] = []
        self.response_calls: list[dict] = []

    async def are_connected(self, a, b):
        return await self.has_connection(a, b) or await self.has_connection(b, a)

    async def has_connection(self, owner, peer):
        return any(
            c.owner_id == owner and c.peer_id == peer for c in self.connections
        )

    async def find_pending(self, sender, receiver):
        return next(
            (
                r for r in self.requests
                if r.sender_id == sender and r.receiver_id == receiver
                and r.status == RequestStatus.PENDING.value
            ),
            None,
        )

    async def pending_between(self, a, b):
        return [
            r for r in self._newest_first(self.requests)
            if r.status == RequestStatus.PENDING.value
            and {r.sender_id, r.receiver_id} == {a, b}
        ]

    async def get_request(self, request_id):
        return next((r for r in self.requests if r.id == request_id), None)

    async def add_request(self, request):
        self.requests.append(request)
        return request

    async def list_pending_received(self, receiver):
        return [
            r for r in self._newest_first(self.requests)
            if r.receiver_id == receiver and r.status == RequestStatus.PENDING.value
        ]

    async def list_pending_sent(self, sender):
        return [
            r for r in self._newest_first(self.requests)
            if r.sender_id == sender and r.status == RequestStatus.PENDING.value
        ]

    async def list_pending_involving(self, user):
        return [
            r for r in self.requests
            if r.status == RequestStatus.PENDING.value
            and user in (r.sender_id, r.receiver_id)
        ]

    async def list_connections(self, owner):
        rows = [c for c in self.connections if c.owner_id == owner]
        return sorted(rows, key=lambda c: c.connected_at, reverse=True)

    async def record_response(self, request, status, responded_at, connect):
        self.response_calls.append({"status": status, "connect": connect})
        request.status = status.value
        request.responded_at = responded_at
        if connect:
            for owner, peer in (
                (request.sender_id, request.receiver_id),
                (request.receiver_id, request.sender_id),
            ):
                if not await self.has_connection(owner, peer):
                    self.connections.append(Connection(
                        id=uuid.uuid4(), owner_id=owner, peer_id=peer,
                        status="accepted", connected_at=responded_at,
                    ))
        return request

    async def delete_pair(self, a, b):
        before = len(self.connections)
        self.connections = [
            c for c in self.connections
            if {c.owner_id, c.peer_id} != {a, b}
        ]
        return before - len(self.connections)

    async def purge_user(self, user):
        self.connections = [
            c for c in self.connections if user not in (c.owner_id, c.peer_id)
        ]
        self.requests = [
            r for r in self.requests if user not in (r.sender_id, r.receiver_id)
        ]

    @staticmethod
    def _newest_first(requests):
        return sorted(requests, key=lambda r: r.sent_at, reverse=True)


class TickingClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now
