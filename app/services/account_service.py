"""Account Service — registration, login, profile updates and the admin user cascade.

Invariants:
    - Passwords are hashed before any repository sees them
    - Unknown email and wrong password produce the same InvalidCredentialsError
    - delete_user removes every connection and request touching the user, then the user,
      in one transaction (purge_user flushes, identities.delete commits)
"""

import logging
import uuid

from app.core.domain_types import UserId, UserType
from app.core.errors import InvalidCredentialsError, EmailTakenError, ResourceNotFoundError
from app.core.identity_rules import check_can_delete_user
from app.core.repository_protocols import (
    ConnectionRepository, IdentityRepository, UserLike,
)
from app.infrastructure.security import (
    create_access_token, hash_password, verify_password,
)
from app.models.user import User, default_preferences
from app.schemas.user import PasswordUpdate, ProfileUpdate, UserLogin, UserRegister

logger = logging.getLogger(__name__)


class AccountService:
    """Identity store operations behind the auth and user routes."""

    def __init__(
        self, identities: IdentityRepository, connections: ConnectionRepository,
    ):
        self.identities = identities
        self.connections = connections

    async def register(self, body: UserRegister) -> tuple[UserLike, str]:
        if await self.identities.get_by_email(body.email):
            raise EmailTakenError()

        user = User(
            id=uuid.uuid4(),
            user_type=body.user_type,
            name=body.name,
            email=body.email,
            hashed_password=hash_password(body.password),
            phone=body.phone,
            location=body.location,
            bio=body.bio,
            department=body.department,
            year=body.year,
            interests=list(body.interests),
            profession=body.profession,
            preferences=default_preferences(),
        )
        user = await self.identities.add(user)
        logger.info("User registered", extra={"user_id": str(user.id)})
        return user, create_access_token(user.id, user.user_type)

    async def login(self, body: UserLogin) -> tuple[UserLike, str]:
        user = await self.identities.get_by_email(body.email)
        if user is None or not verify_password(body.password, user.hashed_password):
            raise InvalidCredentialsError()
        return user, create_access_token(user.id, user.user_type)

    async def update_profile(self, user: UserLike, body: ProfileUpdate) -> UserLike:
        changes = body.model_dump(
            exclude_unset=True, exclude_none=True, exclude={"preferences"},
        )
        for field_name, value in changes.items():
            setattr(user, field_name, value)

        if body.preferences is not None:
            merged = dict(user.preferences or default_preferences())
            merged.update(
                body.preferences.model_dump(by_alias=True, exclude_none=True),
            )
            user.preferences = merged

        user = await self.identities.save(user)
        logger.info("Profile updated", extra={"user_id": str(user.id)})
        return user

    async def change_password(self, user: UserLike, body: PasswordUpdate) -> None:
        if not verify_password(body.current_password, user.hashed_password):
            raise InvalidCredentialsError("Current password is incorrect")
        user.hashed_password = hash_password(body.new_password)
        await self.identities.save(user)
        logger.info("Password changed", extra={"user_id": str(user.id)})

    async def list_professionals(self) -> list[UserLike]:
        return await self.identities.list_by_type(UserType.PROFESSIONAL.value)

    async def delete_user(self, actor_id: UserId, target_id: UserId) -> None:
        check_can_delete_user(actor_id, target_id)
        user = await self.identities.get(target_id)
        if user is None:
            raise ResourceNotFoundError("User", str(target_id))

        await self.connections.purge_user(target_id)
        await self.identities.delete(user)
        logger.info(
            "User and associated connections deleted",
            extra={"user_id": str(actor_id), "peer_id": str(target_id)},
        )
