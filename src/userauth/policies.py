"""Password, lockout, user and token policies.

Every setter clamps or derives its value on assignment, so a policy object
can never be observed in an invalid state. The settings layer builds these
objects once at startup and hands them to the services.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from userauth.domain.shared.time import utc_now

DEFAULT_ALLOWED_USERNAME_CHARACTERS = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._@"
)


def _ceil_minutes(value: timedelta) -> int:
    return math.ceil(value.total_seconds() / 60)


class PasswordPolicy:
    """Password strength rules applied at registration."""

    MIN_REQUIRED_LENGTH = 4
    MIN_UNIQUE_CHARS = 2

    def __init__(  # noqa: PLR0913
        self,
        require_digit: bool = True,
        require_lowercase: bool = True,
        require_uppercase: bool = True,
        require_non_alphanumeric: bool = False,
        required_length: int = 6,
        required_unique_chars: int = 2,
    ):
        self.require_digit = require_digit
        self.require_lowercase = require_lowercase
        self.require_uppercase = require_uppercase
        self.require_non_alphanumeric = require_non_alphanumeric
        self._required_length = self.MIN_REQUIRED_LENGTH
        self._required_unique_chars = self.MIN_UNIQUE_CHARS
        self.required_length = required_length
        self.required_unique_chars = required_unique_chars

    @property
    def required_length(self) -> int:
        return self._required_length

    @required_length.setter
    def required_length(self, value: int) -> None:
        self._required_length = max(value, self.MIN_REQUIRED_LENGTH)
        # Unique characters can never exceed the password length
        self._required_unique_chars = min(
            self._required_unique_chars,
            self._required_length,
        )

    @property
    def required_unique_chars(self) -> int:
        return self._required_unique_chars

    @required_unique_chars.setter
    def required_unique_chars(self, value: int) -> None:
        self._required_unique_chars = min(
            max(value, self.MIN_UNIQUE_CHARS),
            self._required_length,
        )

    def __repr__(self) -> str:
        return (
            f"PasswordPolicy(required_length={self._required_length}, "
            f"required_unique_chars={self._required_unique_chars}, "
            f"digit={self.require_digit}, lower={self.require_lowercase}, "
            f"upper={self.require_uppercase}, "
            f"non_alphanumeric={self.require_non_alphanumeric})"
        )


class LockoutPolicy:
    """Account lockout thresholds.

    Lockout is only enabled when both the attempt threshold and the lockout
    duration are positive. The duration can be assigned either as a
    ``timedelta`` or in whole minutes; whichever is assigned last wins.
    """

    def __init__(
        self,
        max_failed_access_attempts: int = 5,
        lockout_duration: timedelta = timedelta(minutes=15),
        allowed_for_new_users: bool = True,
    ):
        self.allowed_for_new_users = allowed_for_new_users
        self._max_failed_access_attempts = 0
        self._lockout_duration = timedelta(0)
        self.max_failed_access_attempts = max_failed_access_attempts
        self.lockout_duration = lockout_duration

    @property
    def enabled(self) -> bool:
        return (
            self._max_failed_access_attempts > 0
            and self._lockout_duration > timedelta(0)
        )

    @property
    def max_failed_access_attempts(self) -> int:
        return self._max_failed_access_attempts

    @max_failed_access_attempts.setter
    def max_failed_access_attempts(self, value: int) -> None:
        self._max_failed_access_attempts = max(value, 0)

    @property
    def lockout_duration(self) -> timedelta:
        return self._lockout_duration

    @lockout_duration.setter
    def lockout_duration(self, value: timedelta) -> None:
        self._lockout_duration = max(value, timedelta(0))

    @property
    def default_lockout_in_minutes(self) -> int:
        """Lockout duration in minutes, rounded up."""
        return _ceil_minutes(self._lockout_duration)

    @default_lockout_in_minutes.setter
    def default_lockout_in_minutes(self, value: int) -> None:
        self.lockout_duration = timedelta(minutes=value) if value > 0 else timedelta(0)

    def __repr__(self) -> str:
        return (
            f"LockoutPolicy(max_failed_access_attempts="
            f"{self._max_failed_access_attempts}, "
            f"lockout_duration={self._lockout_duration}, "
            f"allowed_for_new_users={self.allowed_for_new_users})"
        )


class UserPolicy:
    """Rules for user names."""

    def __init__(
        self,
        allowed_username_characters: str = DEFAULT_ALLOWED_USERNAME_CHARACTERS,
    ):
        self._allowed_username_characters = DEFAULT_ALLOWED_USERNAME_CHARACTERS
        self.allowed_username_characters = allowed_username_characters

    @property
    def allowed_username_characters(self) -> str:
        return self._allowed_username_characters

    @allowed_username_characters.setter
    def allowed_username_characters(self, value: str | None) -> None:
        self._allowed_username_characters = (
            value or DEFAULT_ALLOWED_USERNAME_CHARACTERS
        )

    def is_allowed_username(self, username: str) -> bool:
        allowed = self._allowed_username_characters
        return all(char in allowed for char in username)


class IdentityPolicy:
    """Bundle of the policies used by the account service."""

    def __init__(
        self,
        password: PasswordPolicy | None = None,
        lockout: LockoutPolicy | None = None,
        user: UserPolicy | None = None,
    ):
        self.password = password or PasswordPolicy()
        self.lockout = lockout or LockoutPolicy()
        self.user = user or UserPolicy()

    def __repr__(self) -> str:
        return f"IdentityPolicy(password={self.password!r}, lockout={self.lockout!r})"


class TokenPolicy:
    """Signing and validation parameters for issued tokens.

    Issuer and audience are only validated when they are set; the
    ``validate_issuer``/``validate_audience`` flags follow the values.
    """

    def __init__(  # noqa: PLR0913
        self,
        secret: str | None = None,
        issuer: str = "",
        audience: str = "",
        expires_in_minutes: int = 20,
        clock_skew: timedelta = timedelta(minutes=5),
    ):
        self.secret = secret
        self._issuer = ""
        self._audience = ""
        self._expires_in_minutes = 0
        self._clock_skew = timedelta(0)
        self.issuer = issuer
        self.audience = audience
        self.expires_in_minutes = expires_in_minutes
        self.clock_skew = clock_skew

    @property
    def issuer(self) -> str:
        return self._issuer

    @issuer.setter
    def issuer(self, value: str | None) -> None:
        self._issuer = value or ""

    @property
    def validate_issuer(self) -> bool:
        return bool(self._issuer)

    @property
    def audience(self) -> str:
        return self._audience

    @audience.setter
    def audience(self, value: str | None) -> None:
        self._audience = value or ""

    @property
    def validate_audience(self) -> bool:
        return bool(self._audience)

    @property
    def expires_in_minutes(self) -> int:
        return self._expires_in_minutes

    @expires_in_minutes.setter
    def expires_in_minutes(self, value: int) -> None:
        self._expires_in_minutes = max(value, 0)

    @property
    def clock_skew(self) -> timedelta:
        return self._clock_skew

    @clock_skew.setter
    def clock_skew(self, value: timedelta) -> None:
        self._clock_skew = max(value, timedelta(0))

    @property
    def clock_skew_in_minutes(self) -> int:
        """Clock skew in minutes, rounded up."""
        return _ceil_minutes(self._clock_skew)

    @clock_skew_in_minutes.setter
    def clock_skew_in_minutes(self, value: int) -> None:
        self.clock_skew = timedelta(minutes=value)

    @property
    def expires(self) -> datetime:
        """Absolute expiry for a token issued now."""
        return utc_now() + timedelta(minutes=self._expires_in_minutes)

    def __repr__(self) -> str:
        # Never echo the secret
        return (
            f"TokenPolicy(issuer={self._issuer!r}, audience={self._audience!r}, "
            f"expires_in_minutes={self._expires_in_minutes}, "
            f"clock_skew={self._clock_skew}, has_secret={bool(self.secret)})"
        )
