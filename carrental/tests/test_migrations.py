"""
Schema migration tests.
"""

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from carrental.app.db.migrations import MIGRATIONS, Migration, applied_versions, run_migrations


@pytest.fixture
async def blank_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    await engine.dispose()


async def column_names(engine, table):
    async with engine.connect() as conn:
        result = await conn.execute(text(f"PRAGMA table_info({table})"))
        return {row[1] for row in result}


@pytest.mark.asyncio
async def test_fresh_database_applies_all_versions(blank_engine):
    applied = await run_migrations(blank_engine)

    assert applied == [m.version for m in MIGRATIONS]
    assert await applied_versions(blank_engine) == [1, 2, 3]


@pytest.mark.asyncio
async def test_rerun_is_a_no_op(blank_engine):
    await run_migrations(blank_engine)
    assert await run_migrations(blank_engine) == []
    assert await applied_versions(blank_engine) == [1, 2, 3]


@pytest.mark.asyncio
async def test_schema_has_expected_columns(blank_engine):
    await run_migrations(blank_engine)

    assert {"id", "first_name", "last_name", "email", "phone", "password", "is_admin", "created_at"} <= \
        await column_names(blank_engine, "users")
    assert {"id", "name", "price", "image", "features", "available"} <= await column_names(blank_engine, "cars")
    assert {
        "car_id", "user_id", "start_date", "end_date", "total_price", "status",
        "customer_name", "customer_email", "customer_phone", "pickup_location",
    } <= await column_names(blank_engine, "bookings")


@pytest.mark.asyncio
async def test_adopts_unversioned_database(blank_engine):
    """Tables created before versioning existed are kept; only the record is added."""
    async with blank_engine.begin() as conn:
        await conn.exec_driver_sql(
            "CREATE TABLE users (id TEXT PRIMARY KEY, first_name TEXT NOT NULL, last_name TEXT NOT NULL, "
            "email TEXT UNIQUE NOT NULL, phone TEXT NOT NULL, password TEXT NOT NULL, "
            "is_admin BOOLEAN DEFAULT FALSE, created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
        )
        await conn.exec_driver_sql(
            "INSERT INTO users (id, first_name, last_name, email, phone, password) "
            "VALUES ('legacy', 'Old', 'Timer', 'old@carhire.com', '1', 'x')"
        )

    await run_migrations(blank_engine)

    async with blank_engine.connect() as conn:
        count = (await conn.execute(text("SELECT COUNT(*) FROM users"))).scalar()
    assert count == 1


@pytest.mark.asyncio
async def test_failed_migration_stays_pending(blank_engine):
    broken = [
        Migration(1, "ok", ("CREATE TABLE first_table (id INTEGER)",)),
        Migration(2, "broken", ("CREATE TABLE second_table (id INTEGER)", "THIS IS NOT SQL")),
    ]

    with pytest.raises(Exception):
        await run_migrations(blank_engine, broken)

    assert await applied_versions(blank_engine) == [1]
