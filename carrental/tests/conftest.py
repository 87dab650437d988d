"""
Centralized Test Configuration.

Every test gets a fresh in-memory SQLite database built by the real
migrations, and an image storage rooted in a temporary directory.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from carrental.app.main import app
from carrental.app.db.migrations import run_migrations
from carrental.app.db.session import get_db
from carrental.app.services import accounts
from carrental.app.services.image_storage import ImageStorage, get_image_storage

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_EMAIL = "admin@carhire.com"
ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await run_migrations(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def storage(tmp_path):
    return ImageStorage(tmp_path / "public")


@pytest.fixture(autouse=True)
def apply_overrides(session_factory, storage):
    """Point the app at the per-test database and image directory."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: storage
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def admin_token(db_session):
    """Create an admin account directly (no route grants the flag) and return its token."""
    _, token = await accounts.register(
        db_session,
        first_name="Ada",
        last_name="Admin",
        email=ADMIN_EMAIL,
        phone="555-0100",
        password=ADMIN_PASSWORD,
        is_admin=True
    )
    return token


@pytest.fixture
async def customer_token(db_session):
    _, token = await accounts.register(
        db_session,
        first_name="Casey",
        last_name="Customer",
        email="casey@carhire.com",
        phone="555-0101",
        password="casey-pass-123"
    )
    return token


@pytest.fixture
def car_form():
    """Dashboard form fields for a valid car."""
    return {
        "name": "Toyota Corolla",
        "category": "sedan",
        "price": "4500",
        "rating": "4.5",
        "seats": "5",
        "transmission": "automatic",
        "fuel": "petrol",
        "badge": "Popular",
        "features": "[\"AC\", \"Bluetooth\"]",
    }
