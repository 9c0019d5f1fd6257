"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.student import Student
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.password_hasher import hash_password
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.repositories.sqlalchemy_student_repo import (
    SQLAlchemyStudentRepository,
)


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "correct-horse-battery"

StudentFactory = Callable[..., Awaitable[Student]]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def student_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> StudentFactory:
    """Insert a student directly into the test database."""
    counter = {"n": 0}

    async def create(first_name: str = "Test", **overrides: Any) -> Student:
        counter["n"] += 1
        fields: dict[str, Any] = {
            "first_name": first_name,
            "last_name": f"Student{counter['n']}",
            "email": f"{first_name.lower()}{counter['n']}@example.com",
            "password_hash": hash_password(TEST_PASSWORD),
            "department": "Computer Science",
        }
        fields.update(overrides)
        async with session_factory() as session:
            student = await SQLAlchemyStudentRepository(session).create(Student(**fields))
            await session.commit()
        return student

    return create


@pytest.fixture
def headers_for(auth_provider: JWTAuthProvider) -> Callable[[Student], dict[str, str]]:
    """Build Authorization headers carrying a token for a student."""

    def build(student: Student) -> dict[str, str]:
        token = auth_provider.create_token(
            TokenUser(id=student.id, email=student.email, display_name=student.full_name)
        )
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the test database.

    Authentication is real: requests need a token from ``headers_for``
    or a cookie from ``/api/v1/auth/login``.
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_uow_factory
    from infrastructure.database.session import get_async_session
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_uow_factory] = lambda: test_uow_factory
    app.dependency_overrides[get_async_session] = override_get_async_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
