"""
Pytest configuration for user store integration tests.

Integration tests use Testcontainers for an ephemeral PostgreSQL instance.
"""

from tests.shared.fixtures.postgres import (
    async_engine,
    db_session,
    postgres_container,
)

__all__ = [
    "async_engine",
    "db_session",
    "postgres_container",
]
