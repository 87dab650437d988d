"""
Versioned schema migrations.

Each migration is an ordered list of DDL statements identified by an integer
version. Applied versions are recorded in ``schema_migrations`` so a restart
only runs the steps a database has not seen yet. Statements use
``IF NOT EXISTS`` where the dialects allow it so a database created by an
earlier, unversioned deployment can be adopted by migration 1.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Sequence

from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, select
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger("carrental.migrations")

migrations_metadata = MetaData()

schema_migrations = Table(
    "schema_migrations",
    migrations_metadata,
    Column("version", Integer, primary_key=True),
    Column("name", String(100), nullable=False),
    Column("applied_at", DateTime(timezone=True), nullable=False),
)


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    statements: Sequence[str]


MIGRATIONS: List[Migration] = [
    Migration(
        version=1,
        name="create_core_tables",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL,
                phone TEXT NOT NULL,
                password TEXT NOT NULL,
                is_admin BOOLEAN DEFAULT FALSE,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS cars (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                category TEXT,
                price INTEGER NOT NULL,
                rating REAL,
                seats INTEGER,
                transmission TEXT,
                fuel TEXT,
                image TEXT,
                badge TEXT,
                features TEXT,
                available BOOLEAN DEFAULT TRUE,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS bookings (
                id TEXT PRIMARY KEY,
                car_id TEXT,
                user_id TEXT,
                start_date DATE NOT NULL,
                end_date DATE NOT NULL,
                total_price INTEGER NOT NULL,
                status TEXT DEFAULT 'pending',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """,
        ),
    ),
    Migration(
        version=2,
        name="add_booking_contact_columns",
        statements=(
            "ALTER TABLE bookings ADD COLUMN customer_name TEXT",
            "ALTER TABLE bookings ADD COLUMN customer_email TEXT",
            "ALTER TABLE bookings ADD COLUMN customer_phone TEXT",
            "ALTER TABLE bookings ADD COLUMN pickup_location TEXT",
        ),
    ),
    Migration(
        version=3,
        name="add_lookup_indexes",
        statements=(
            "CREATE INDEX IF NOT EXISTS ix_cars_available_created_at ON cars (available, created_at)",
            "CREATE INDEX IF NOT EXISTS ix_bookings_car_id_status ON bookings (car_id, status)",
            "CREATE INDEX IF NOT EXISTS ix_bookings_user_id_created_at ON bookings (user_id, created_at)",
        ),
    ),
]


async def applied_versions(engine: AsyncEngine) -> List[int]:
    async with engine.begin() as conn:
        await conn.run_sync(migrations_metadata.create_all)
        result = await conn.execute(select(schema_migrations.c.version).order_by(schema_migrations.c.version))
        return [row[0] for row in result]


async def run_migrations(engine: AsyncEngine, migrations: Sequence[Migration] = None) -> List[int]:
    """
    Apply pending migrations in version order.

    Each migration runs in its own transaction together with the row that
    records it, so a failed step leaves earlier steps applied and itself
    pending.

    Returns:
        Versions applied by this call (empty when the schema is current)
    """
    migrations = sorted(migrations if migrations is not None else MIGRATIONS, key=lambda m: m.version)
    done = set(await applied_versions(engine))
    applied = []

    for migration in migrations:
        if migration.version in done:
            continue

        async with engine.begin() as conn:
            for statement in migration.statements:
                await conn.exec_driver_sql(statement)
            await conn.execute(
                schema_migrations.insert().values(
                    version=migration.version,
                    name=migration.name,
                    applied_at=datetime.now(timezone.utc),
                )
            )

        logger.info("Applied migration %s (%s)", migration.version, migration.name)
        applied.append(migration.version)

    return applied
