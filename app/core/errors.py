"""Error Hierarchy — typed, categorized exceptions for all BlogNest failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are user-correctable; infrastructure errors (500-level) are critical
    - to_response() produces the REST failure envelope ({"success": false, ...})
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with BlogNestError base: FastAPI global handler catches all (uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Nothing here is retried: every failure is reported synchronously to the caller
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class BlogNestError(Exception):
    """Base exception for all BlogNest errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST failure envelope."""
        return {
            "success": False,
            "message": self.message,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(BlogNestError):
    """Request data is missing or malformed."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class AlreadyConnectedError(BlogNestError):
    """A connection already exists between the two identities."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Already connected with this user",
            "ALREADY_CONNECTED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class DuplicateRequestError(BlogNestError):
    """A pending request from the same sender to the same receiver exists."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Connection request already sent",
            "DUPLICATE_REQUEST", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class RequestNotPendingError(BlogNestError):
    """A connection request was already answered or withdrawn."""
    def __init__(self, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Connection request is already {status}",
            "REQUEST_NOT_PENDING", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.status = status


class ResourceNotFoundError(BlogNestError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(BlogNestError):
    """Authenticated actor may not perform this action."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class AuthenticationError(BlogNestError):
    """Request did not carry a usable bearer token."""
    def __init__(
        self,
        message: str,
        code: str = "AUTHENTICATION_REQUIRED",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidCredentialsError(BlogNestError):
    """Email/password pair did not match."""
    def __init__(self, message: str = "Invalid email or password", context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_CREDENTIALS", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class EmailTakenError(BlogNestError):
    """Registration attempted with an email that already has an account."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "User with this email already exists",
            "EMAIL_TAKEN", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(BlogNestError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
