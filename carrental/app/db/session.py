"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support. SQLite (aiosqlite) is the default
store and runs in WAL journal mode; PostgreSQL (asyncpg) is supported by
pointing DATABASE_URL at it.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from carrental.app.core.config import settings


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def enable_sqlite_wal(engine: AsyncEngine) -> None:
    """Switch every new SQLite connection to write-ahead logging."""

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def build_engine(url: str) -> AsyncEngine:
    options = {"echo": settings.db_echo, "future": True}
    if not is_sqlite(url):
        options.update(pool_size=settings.db_pool_size, max_overflow=settings.db_max_overflow)

    new_engine = create_async_engine(url, **options)
    if is_sqlite(url):
        enable_sqlite_wal(new_engine)
    return new_engine


# Create async engine
engine = build_engine(settings.database_url)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
