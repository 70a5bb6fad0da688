"""Test fixtures — injected auth core, in-memory stores, SQLite sessions.

Learn: Testing pattern for the app:

1. The token service is built with from_secret(), never from the
   environment, so no test depends on MEMO_JWT_SECRET.
2. The password hasher uses tiny Argon2 costs so each hash takes
   milliseconds instead of ~100ms.
3. `client` runs against in-memory stores; `sql_client` runs the real
   SQLAlchemy stores on an in-memory SQLite database by overriding
   get_db, the same way production swaps in a per-request session.

httpx's ASGITransport does not run the lifespan, which is why the token
service has to be injected through create_app().
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from memoapp.auth.password import PasswordHasher
from memoapp.auth.token import TokenService
from memoapp.db.engine import get_db
from memoapp.db.models import Base
from memoapp.main import create_app
from memoapp.repository.memory import InMemoryAccountStore, InMemoryNoteStore

TEST_SECRET = b"test-secret-with-at-least-32-bytes-of-entropy"
TEST_DB_URL = "sqlite+aiosqlite://"


@pytest.fixture()
def jwt_secret() -> bytes:
    return TEST_SECRET


@pytest.fixture()
def token_service(jwt_secret) -> TokenService:
    return TokenService.from_secret(jwt_secret, ttl_seconds=3600)


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture()
def account_store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture()
def note_store() -> InMemoryNoteStore:
    return InMemoryNoteStore()


@pytest_asyncio.fixture()
async def db_session():
    """Fresh in-memory SQLite database with all tables, one per test."""
    engine = create_async_engine(TEST_DB_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest.fixture()
def app(token_service, hasher, account_store, note_store):
    return create_app(
        token_service=token_service,
        password_hasher=hasher,
        account_store=account_store,
        note_store=note_store,
    )


async def _client_for(app, db_session):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture()
async def client(app, db_session):
    """HTTP client over the in-memory stores."""
    async with await _client_for(app, db_session) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def sql_client(token_service, hasher, db_session):
    """HTTP client over the SQLAlchemy stores (SQLite in memory)."""
    sql_app = create_app(token_service=token_service, password_hasher=hasher)
    async with await _client_for(sql_app, db_session) as ac:
        yield ac
    sql_app.dependency_overrides.clear()


async def _signup_and_login(client, email: str, password: str = "password123") -> dict:
    r = await client.post(
        "/api/v1/auth/signup", json={"email": email, "password": password}
    )
    assert r.status_code == 201, r.text
    r = await client.post(
        "/api/v1/auth/login", json={"email": email, "password": password}
    )
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture()
def signup_and_login():
    """Register + login helper; returns Authorization headers for the new account."""
    return _signup_and_login
