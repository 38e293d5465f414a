"""SQLAlchemy model for user accounts and their lockout state."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from userauth.infrastructure.persistence.sqlalchemy.base import (
    AuthBase,
    TimestampMixin,
)


class UserAccountModel(TimestampMixin, AuthBase):
    """SQLAlchemy model for a user account.

    Email and username are unique after normalization, so lookups ignore
    case on every backend.
    """

    __tablename__ = "user_accounts"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    normalized_email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    normalized_username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    access_failed_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    lockout_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    lockout_enabled: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserAccountModel(id={self.id}, email={self.email})>"
