"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, RequestId, ConnectionId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders and compare equal to DB strings
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
RequestId = NewType("RequestId", UUID)
ConnectionId = NewType("ConnectionId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class UserType(str, Enum):
    """Role tag carried by every identity."""
    STUDENT = "student"
    PROFESSIONAL = "professional"
    ADMIN = "admin"


class RequestStatus(str, Enum):
    """ConnectionRequest lifecycle — pending is the only non-terminal state."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class ConnectionStatus(str, Enum):
    """Relationship between two identities as seen from one side."""
    CONNECTED = "connected"
    PENDING_SENT = "pending_sent"
    PENDING_RECEIVED = "pending_received"
    NOT_CONNECTED = "not_connected"

