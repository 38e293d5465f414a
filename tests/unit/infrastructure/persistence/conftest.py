"""Fixtures for SQLAlchemy user store unit tests (aiosqlite)."""

from tests.shared.fixtures.database import sqlite_engine, sqlite_session

__all__ = ["sqlite_engine", "sqlite_session"]
