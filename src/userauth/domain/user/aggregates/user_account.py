"""User account aggregate.

Holds the credential record and the per-account failed-access state used
by lockout. Stores persist it; the transitions live here so every store
applies them the same way.
"""

from datetime import datetime, timedelta
from typing import Union
from uuid import UUID, uuid4

from userauth.domain.shared.time import ensure_tz_aware, utc_now
from userauth.domain.user.value_objects.email import Email, normalize_identifier


class UserAccount:
    """
    User account aggregate root.

    Lockout is a computed predicate over ``lockout_end``. The failed access
    count is only cleared by ``reset_access_failed_count`` (a successful
    login), never by the lockout window running out.
    """

    def __init__(  # noqa: PLR0913
        self,
        email: Union[str, Email],
        username: str | None = None,
        id: UUID | None = None,
        password_hash: str | None = None,
        access_failed_count: int = 0,
        lockout_end: datetime | None = None,
        lockout_enabled: bool = True,
        created_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._username = username.strip() if username else self._email.value
        self._id = id or uuid4()
        self._password_hash = password_hash
        self._access_failed_count = max(access_failed_count, 0)
        self._lockout_end = ensure_tz_aware(lockout_end) if lockout_end else None
        self._lockout_enabled = lockout_enabled
        self._created_at = created_at or utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def normalized_email(self) -> str:
        return normalize_identifier(self._email.value)

    @property
    def username(self) -> str:
        return self._username

    @property
    def normalized_username(self) -> str:
        return normalize_identifier(self._username)

    @property
    def password_hash(self) -> str | None:
        return self._password_hash

    @property
    def access_failed_count(self) -> int:
        return self._access_failed_count

    @property
    def lockout_end(self) -> datetime | None:
        return self._lockout_end

    @property
    def lockout_enabled(self) -> bool:
        return self._lockout_enabled

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def set_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash

    def is_locked_out(self, now: datetime | None = None) -> bool:
        if not self._lockout_enabled or self._lockout_end is None:
            return False
        return (now or utc_now()) < self._lockout_end

    def record_failed_access(
        self,
        max_failed_access_attempts: int,
        lockout_duration: timedelta,
        now: datetime | None = None,
    ) -> bool:
        """Count a failed password check.

        Returns True if this attempt locked the account.
        """
        self._access_failed_count += 1

        if max_failed_access_attempts <= 0 or lockout_duration <= timedelta(0):
            return False

        if self._access_failed_count >= max_failed_access_attempts:
            self._lockout_end = (now or utc_now()) + lockout_duration
            return True
        return False

    def reset_access_failed_count(self) -> None:
        self._access_failed_count = 0
        self._lockout_end = None

    def matches_identity(self, other: "UserAccount") -> bool:
        """Check whether two accounts collide on email or username."""
        return (
            self.normalized_email == other.normalized_email
            or self.normalized_username == other.normalized_username
        )

    @classmethod
    def create(
        cls,
        email: Union[str, Email],
        username: str | None = None,
        lockout_enabled: bool = True,
    ) -> "UserAccount":
        return cls(email=email, username=username, lockout_enabled=lockout_enabled)

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        email: Union[str, Email],
        username: str,
        password_hash: str | None,
        access_failed_count: int,
        lockout_end: datetime | None,
        lockout_enabled: bool,
        created_at: datetime,
    ) -> "UserAccount":
        return cls(
            id=id,
            email=email,
            username=username,
            password_hash=password_hash,
            access_failed_count=access_failed_count,
            lockout_end=lockout_end,
            lockout_enabled=lockout_enabled,
            created_at=created_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserAccount):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"UserAccount(id={self._id}, email={self._email.value})"
