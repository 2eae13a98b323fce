import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi_users.db import SQLAlchemyUserDatabase  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.auth import UserManager  # noqa: E402
from db.database import Base, get_async_session  # noqa: E402
from db.inventory import item, movement, stock  # noqa: E402,F401
from db.users import User  # noqa: E402
from main import app  # noqa: E402
from schemas.users import UserCreate  # noqa: E402

PASSWORD = "secret123"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    async def _override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_user(session_maker, email: str, role: str, password: str = PASSWORD) -> User:
    async with session_maker() as session:
        manager = UserManager(SQLAlchemyUserDatabase(session, User))
        return await manager.create(
            UserCreate(email=email, password=password, name=role.title(), role=role),
            safe=False,
        )


async def login(client: AsyncClient, email: str, password: str = PASSWORD) -> dict:
    res = await client.post("/auth/jwt/login", data={"username": email, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.fixture
def auth_headers(client, session_maker):
    """Factory: create a user with the given role and return bearer headers for it."""

    async def _make(role: str, email: str = None) -> dict:
        email = email or f"{role}@barstock.com"
        await create_user(session_maker, email, role)
        return await login(client, email)

    return _make
