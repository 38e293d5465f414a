"""
Database fixtures for user store tests.

Unit tests run against an in-memory SQLite database through aiosqlite.
Integration tests use an ephemeral PostgreSQL from Testcontainers (see
``postgres.py``). Both hand out a session on freshly created tables.

Usage:
    # In your conftest.py
    from tests.shared.fixtures.database import sqlite_engine, sqlite_session

    async def test_something(sqlite_session):
        store = UserStoreSQLAlchemy(sqlite_session, LockoutPolicy())
        await store.create(user, "Secret123")
"""

from collections.abc import AsyncIterator

import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from userauth.infrastructure.persistence.sqlalchemy import AuthBase

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


async def open_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """
    Yield a session on a clean schema.

    1. Drops and creates all tables
    2. Yields an isolated session
    3. Rolls back uncommitted changes
    4. Drops all tables again
    """
    # Import models to register them with AuthBase.metadata
    import userauth.infrastructure.persistence.sqlalchemy.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(AuthBase.metadata.drop_all)
        await conn.run_sync(AuthBase.metadata.create_all)

    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(AuthBase.metadata.drop_all)


@pytest_asyncio.fixture
async def sqlite_engine():
    """In-memory SQLite engine; StaticPool keeps the single connection alive."""
    engine = create_async_engine(
        SQLITE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite manages transactions itself and breaks SAVEPOINT; let
    # SQLAlchemy emit BEGIN instead
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def sqlite_session(sqlite_engine):
    """Fresh SQLite session per test."""
    async for session in open_session(sqlite_engine):
        yield session
