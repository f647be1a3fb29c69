"""Service test fixtures: async DB, user store and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Every test gets a fresh app from create_app() (fresh throttle state)
    - get_db dependency overridden to use the test DB
    - db_manager patched so /health pings the test engine
"""

import pytest
from httpx import ASGITransport, AsyncClient

import roster.infrastructure.database as db_module
from roster.config import Settings
from roster.db.base import Base
from roster.db.session import create_session_factory
from roster.infrastructure.database import DatabaseSessionManager, get_db
from roster.main import create_app
from roster.services.user_store import SqlUserStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine_and_factory():
    engine, factory = create_session_factory(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine, factory
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_engine(test_engine_and_factory):
    return test_engine_and_factory[0]


@pytest.fixture
def test_session_factory(test_engine_and_factory):
    return test_engine_and_factory[1]


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_db, ticking_clock):
    return SqlUserStore(test_db, clock=ticking_clock)


@pytest.fixture
def rate_limit():
    """Per-minute limit for the test app; override in a module to exercise 429s."""
    return 1000


@pytest.fixture
def app(test_engine, test_session_factory, rate_limit):
    settings = Settings(
        database_url=TEST_DATABASE_URL,
        rate_limit_per_minute=rate_limit,
        auto_create_tables=False,
        service_name="roster-api-test",
    )
    application = create_app(settings)

    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
async def client(app, test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
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
async def create_user(client):
    """POST a user and return the created payload."""
    async def _create(name="Ada Lovelace", email="ada@example.com", phone=None):
        body = {"name": name, "email": email}
        if phone is not None:
            body["phone"] = phone
        res = await client.post("/api/users", json=body)
        assert res.status_code == 201, res.text
        return res.json()["data"]
    return _create
