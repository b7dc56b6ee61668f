"""Service test fixtures — async DB + FastAPI test client + seeded accounts.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - db_manager patched so the readiness probe sees the test engine
    - Seeded accounts carry a valid bearer token for the auth gate

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares the one connection, so the
      fixture session sees what the app committed
    - Accounts inserted directly (not via /register): route tests for connections do not
      depend on the registration route
"""

import uuid
from dataclasses import dataclass

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.security import create_access_token, hash_password
from app.models.user import User, default_preferences
import app.infrastructure.database as db_module
import app.models  # noqa: F401
from app.main import app
from tests.services.fake_stores import DEFAULT_PASSWORD



@dataclass
class Account:
    user: User
    token: str

    @property
    def id(self) -> uuid.UUID:
        return self.user.id

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def make_account(test_db):
    """Factory: insert a user and return it with a signed token."""
    async def _make(
        name: str,
        user_type: str = "student",
        password: str = DEFAULT_PASSWORD,
        **fields,
    ) -> Account:
        if user_type == "student":
            fields.setdefault("department", "Computer Science")
            fields.setdefault("year", "3")
        elif user_type == "professional":
            fields.setdefault("profession", "Engineer")
        user = User(
            id=uuid.uuid4(),
            user_type=user_type,
            name=name,
            email=fields.pop("email", f"{name.lower().replace(' ', '.')}@example.com"),
            hashed_password=hash_password(password),
            preferences=default_preferences(),
            interests=[],
            **fields,
        )
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return Account(user, create_access_token(user.id, user.user_type))

    return _make


@pytest.fixture
async def alice(make_account):
    return await make_account("Alice Smith", "student")


@pytest.fixture
async def bob(make_account):
    return await make_account("Bob Jones", "professional", profession="Data Scientist")


@pytest.fixture
async def carol(make_account):
    return await make_account("Carol White", "student", department="Design")
