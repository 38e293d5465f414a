"""SQLAlchemy implementation for userauth persistence.

Provides:
- AuthBase: Declarative base for userauth models
- UserAccountModel: SQLAlchemy model for user accounts
- UserStoreSQLAlchemy: UserStore implementation on an AsyncSession
"""

from userauth.infrastructure.persistence.sqlalchemy.base import AuthBase
from userauth.infrastructure.persistence.sqlalchemy.models import UserAccountModel
from userauth.infrastructure.persistence.sqlalchemy.repositories import (
    UserStoreSQLAlchemy,
)

__all__ = [
    "AuthBase",
    "UserAccountModel",
    "UserStoreSQLAlchemy",
]
