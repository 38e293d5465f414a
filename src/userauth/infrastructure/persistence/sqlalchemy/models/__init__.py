# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy models for user accounts."""

from userauth.infrastructure.persistence.sqlalchemy.models.user_account_model import (
    UserAccountModel,
)

__all__ = ["UserAccountModel"]
