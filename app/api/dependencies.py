"""Route Dependencies — repository wiring and the bearer-token authentication gate.

Invariants:
    - Every repository in one request shares the request's AsyncSession (get_db is cached
      per request by FastAPI)
    - get_current_user rejects with 401 before any route body runs
    - Token source order: Authorization: Bearer header, then the "token" cookie

Design Decisions:
    - HTTPBearer(auto_error=False): missing header falls through to the cookie, and our
      own AuthenticationError keeps the uniform failure envelope
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.domain_types import UserId, UserType
from app.core.errors import AuthenticationError, ForbiddenError
from app.infrastructure.database import get_db
from app.infrastructure.security import decode_access_token
from app.models.user import User
from app.services.account_service import AccountService
from app.services.connection_repository import SqlConnectionRepository
from app.services.connection_workflow import ConnectionWorkflow
from app.services.identity_repository import SqlIdentityRepository

_bearer = HTTPBearer(auto_error=False)


def get_identity_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlIdentityRepository:
    return SqlIdentityRepository(db)


def get_connection_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlConnectionRepository:
    return SqlConnectionRepository(db)


def get_connection_workflow(
    connections: SqlConnectionRepository = Depends(get_connection_repository),
    identities: SqlIdentityRepository = Depends(get_identity_repository),
) -> ConnectionWorkflow:
    return ConnectionWorkflow(
        connections, identities,
        available_limit=get_settings().available_users_limit,
    )


def get_account_service(
    identities: SqlIdentityRepository = Depends(get_identity_repository),
    connections: SqlConnectionRepository = Depends(get_connection_repository),
) -> AccountService:
    return AccountService(identities, connections)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    identities: SqlIdentityRepository = Depends(get_identity_repository),
) -> User:
    """Resolve the authenticated user or raise 401."""
    token = credentials.credentials if credentials else None
    if not token:
        token = request.cookies.get("token")
    if not token:
        raise AuthenticationError("Access denied. No token provided.")

    user_id = decode_access_token(token)
    user = await identities.get(UserId(user_id))
    if user is None:
        raise AuthenticationError(
            "Token is valid but user not found", "USER_NOT_FOUND",
        )
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.user_type != UserType.ADMIN.value:
        raise ForbiddenError("Admin access required")
    return user
