"""SQL Identity Repository — SQLAlchemy implementation of IdentityRepository.

Invariants:
    - Email lookups are case-insensitive (normalize_email on every query)
    - delete() commits: it closes the admin cascade started by purge_user()
    - search() escapes LIKE wildcards in user input
    - A unique-email violation on add() is reported as EmailTakenError, not a DB failure

Design Decisions:
    - Bound to the request's AsyncSession: all writes of one HTTP call share a transaction
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import UserId
from app.core.errors import EmailTakenError
from app.core.identity_rules import normalize_email
from app.models.user import User

logger = logging.getLogger(__name__)


class SqlIdentityRepository:
    """Identity persistence over one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UserId) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email)),
        )
        return result.scalar_one_or_none()

    async def get_many(self, user_ids: Iterable[UserId]) -> dict[UUID, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(User).where(User.id.in_(ids)))
        return {u.id: u for u in result.scalars().all()}

    async def add(self, user: User) -> User:
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # registration race: the unique email index decided
            await self.db.rollback()
            raise EmailTakenError()
        await self.db.refresh(user)
        return user

    async def save(self, user: User) -> User:
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self.db.delete(user)
        await self.db.commit()

    async def list_by_type(self, user_type: str) -> list[User]:
        result = await self.db.execute(
            select(User)
            .where(User.user_type == user_type)
            .order_by(User.name),
        )
        return list(result.scalars().all())

    async def search(
        self,
        exclude_ids: Iterable[UserId],
        search: str | None,
        user_type: str | None,
        limit: int,
    ) -> list[User]:
        query = select(User)
        excluded = set(exclude_ids)
        if excluded:
            query = query.where(User.id.not_in(excluded))
        if user_type:
            query = query.where(User.user_type == user_type)
        if search:
            needle = search.lower()
            query = query.where(or_(
                func.lower(User.name).contains(needle, autoescape=True),
                func.lower(func.coalesce(User.profession, "")).contains(
                    needle, autoescape=True,
                ),
            ))
        query = query.order_by(User.name).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())
