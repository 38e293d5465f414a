# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy repository implementations."""

from userauth.infrastructure.persistence.sqlalchemy.repositories.user_store import (
    UserStoreSQLAlchemy,
)

__all__ = ["UserStoreSQLAlchemy"]
