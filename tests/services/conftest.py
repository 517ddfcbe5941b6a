"""Service test fixtures — async DB, handler harness and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Harness.send() opens a fresh session per request, like one HTTP request would
    - get_db dependency overridden to use the test DB session
    - db_manager patched so the readiness probe sees the test engine
    - app.state.runtime built per test (ASGITransport does not run the lifespan)

Design Decisions:
    - SQLite in-memory + StaticPool: every session shares the one connection, so data
      committed by one request is visible to the next
    - RecordingTransport instead of the bus for handler tests: events are inspected
      synchronously, no worker tasks involved
    - Low PBKDF2 iteration count keeps registration tests fast
"""

from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from taskflow.config import Settings
from taskflow.core import requests as rq
from taskflow.core.domain_types import UserId
from taskflow.core.errors import TransportUnavailableError
from taskflow.core.identity import ANONYMOUS, CallerIdentity
from taskflow.db.base import Base
from taskflow.db.session import create_schema
from taskflow.infrastructure.database import get_db, DatabaseSessionManager
from taskflow.infrastructure.repositories import SqlEntityStore
from taskflow.infrastructure.runtime import build_runtime
from taskflow.infrastructure.security import JwtTokenService
from taskflow.models import User
from taskflow.services.dispatch import RequestDispatch
from taskflow.services.event_publisher import DomainEventPublisher
from taskflow.services.handler_base import HandlerContext
import taskflow.infrastructure.database as db_module
from taskflow.main import app

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
TEST_PASSWORD = "Secret#123"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    await create_schema(engine)
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


# ─── Handler harness ────────────────────────────────────────────

class RecordingTransport:
    """EventTransport that records published events; can be switched off."""

    def __init__(self):
        self.events: list = []
        self.available = True

    def subscribe(self, handler) -> None:
        pass

    async def publish(self, event) -> None:
        if not self.available:
            raise TransportUnavailableError()
        self.events.append(event)

    def types(self) -> list[str]:
        return [e.event_type for e in self.events]

    def clear(self) -> None:
        self.events.clear()


class Harness:
    """Sends requests through the real dispatch pipeline against the test database."""

    def __init__(self, session_factory, tokens: JwtTokenService):
        self.session_factory = session_factory
        self.tokens = tokens
        self.transport = RecordingTransport()

    async def send(self, request, as_user: User | UUID | None = None):
        if as_user is None:
            caller = ANONYMOUS
        else:
            user_id = as_user if isinstance(as_user, UUID) else as_user.id
            caller = CallerIdentity(UserId(user_id))
        async with self.session_factory() as session:
            ctx = HandlerContext(
                store=SqlEntityStore(session),
                caller=caller,
                publisher=DomainEventPublisher(self.transport),
                tokens=self.tokens,
            )
            return await RequestDispatch(ctx).send(request)

    async def create_user(
        self, first_name: str = "Olive", last_name: str = "Owner", email: str | None = None,
    ) -> User:
        async with self.session_factory() as session:
            user = User(
                email=email or f"{first_name.lower()}@example.com",
                first_name=first_name,
                last_name=last_name,
                password_hash=self.tokens.hash_password(TEST_PASSWORD),
            )
            session.add(user)
            await session.commit()
            return user

    async def create_project(self, owner: User, name: str = "Apollo", **kw):
        return await self.send(rq.CreateProject(name=name, **kw), as_user=owner)

    async def add_member(self, project_id: UUID, owner: User, member: User):
        return await self.send(
            rq.AddProjectMember(project_id=project_id, user_id=member.id), as_user=owner,
        )

    async def create_task(self, project_id: UUID, as_user: User, title: str = "Ship it", **kw):
        return await self.send(
            rq.CreateTask(project_id=project_id, title=title, **kw), as_user=as_user,
        )


@pytest.fixture
def tokens():
    return JwtTokenService(
        secret=TEST_SECRET, issuer="taskflow", audience="taskflow-api",
        hash_iterations=1000,
    )


@pytest.fixture
def harness(test_session_factory, tokens):
    return Harness(test_session_factory, tokens)


# ─── HTTP client ────────────────────────────────────────────────

@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret=TEST_SECRET,
        password_hash_iterations=1000,
        event_partitions=2,
    )


@pytest.fixture
async def runtime(test_settings):
    rt = build_runtime(test_settings)
    await rt.start()
    yield rt
    await rt.stop()


@pytest.fixture
async def client(test_engine, test_session_factory, runtime):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.runtime = runtime

    # Patch db_manager for the readiness probe, which uses it directly
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
    app.state.runtime = None
    db_module.db_manager = original_manager
