"""Outcome types shared by every public operation.

``Outcome`` is a plain success/failure with ordered error messages,
``Result`` additionally carries data on success. Token operations use
``TokenResult`` and ``TokenValidationResult``, which attach a
``SecurityErrorKind`` so callers can branch without matching on strings.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from userauth.exceptions import ResultContractError

T = TypeVar("T")


class Outcome:
    """Success or failure of an operation that produces no data."""

    __slots__ = ("_success", "_errors")

    def __init__(self, success: bool, errors: Iterable[str] = ()):
        self._success = success
        self._errors = tuple(errors)

    @classmethod
    def success(cls) -> Outcome:
        return cls(True)

    @classmethod
    def failure(cls, *errors: str) -> Outcome:
        return cls(False, errors)

    @staticmethod
    def merge(*results: bool) -> bool:
        """Return True only if every given result is truthy."""
        return all(results)

    @property
    def is_success(self) -> bool:
        return self._success

    @property
    def is_failure(self) -> bool:
        return not self._success

    @property
    def errors(self) -> tuple[str, ...]:
        return self._errors

    @property
    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def to_result(self, data: T | None = None) -> Result[T]:
        """Convert to a ``Result`` carrying ``data`` when successful."""
        return Result(self._success, data, self._errors)

    def __bool__(self) -> bool:
        return self._success

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Outcome):
            return NotImplemented
        return self._success == other._success and self._errors == other._errors

    def __hash__(self) -> int:
        return hash((self._success, self._errors))

    def __str__(self) -> str:
        if self._success:
            return "Success"
        return f"Failure: {', '.join(self._errors)}"

    def __repr__(self) -> str:
        return f"Outcome(success={self._success}, errors={list(self._errors)})"


class Result(Generic[T]):
    """Success carrying data, or failure carrying error messages.

    A success always has data: building one with ``None`` raises
    ``ResultContractError`` immediately.

    Examples
    --------
    >>> Result.success(42).data
    42
    >>> Result.failure("not found").errors
    ('not found',)
    """

    __slots__ = ("_success", "_data", "_errors")

    def __init__(
        self,
        success: bool,
        data: T | None = None,
        errors: Iterable[str] = (),
    ):
        if success and data is None:
            msg = "Result cannot be set to success with no data"
            raise ResultContractError(msg)

        self._success = success
        self._data = data if success else None
        self._errors = tuple(errors)

    @classmethod
    def success(cls, data: T) -> Result[T]:
        return cls(True, data)

    @classmethod
    def failure(cls, *errors: str) -> Result[T]:
        return cls(False, None, errors)

    @classmethod
    def from_data(
        cls,
        data: T | None,
        failure_message: str = "Data must not be null",
    ) -> Result[T]:
        """Succeed with ``data`` if present, otherwise fail with the message."""
        if data is not None:
            return cls.success(data)
        return cls.failure(failure_message)

    @property
    def is_success(self) -> bool:
        return self._success

    @property
    def is_failure(self) -> bool:
        return not self._success

    @property
    def errors(self) -> tuple[str, ...]:
        return self._errors

    @property
    def has_errors(self) -> bool:
        return len(self._errors) > 0

    @property
    def data(self) -> T:
        if not self._success or self._data is None:
            msg = "Cannot access data if result is failed"
            raise ResultContractError(msg)
        return self._data

    def to_outcome(self) -> Outcome:
        """Drop the data and keep only success and errors."""
        return Outcome(self._success, self._errors)

    def __bool__(self) -> bool:
        return self._success

    def __str__(self) -> str:
        if self._success:
            return f"Success: {self._data}"
        return f"Failure: {', '.join(self._errors)}"

    def __repr__(self) -> str:
        if self._success:
            return f"Result(success=True, data={self._data!r})"
        return f"Result(success=False, errors={list(self._errors)})"


class SecurityErrorKind(str, Enum):
    """Machine-readable reason for a token failure."""

    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    INVALID_CONFIGURATION = "invalid_configuration"
    UNEXPECTED_ERROR = "unexpected_error"

    # Finer-grained kinds, only reported when detailed errors are enabled
    INVALID_AUDIENCE = "invalid_audience"
    INVALID_ISSUER = "invalid_issuer"
    MISSING_TOKEN = "missing_token"
    INVALID_CLAIM = "invalid_claim"
    SIGNATURE_VALIDATION_FAILED = "signature_validation_failed"
    MALFORMED_TOKEN = "malformed_token"


@dataclass(frozen=True)
class TokenValidationResult:
    """Outcome of validating a token."""

    is_success: bool
    code: SecurityErrorKind | None = None
    error_messages: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> TokenValidationResult:
        return cls(is_success=True)

    @classmethod
    def failure(
        cls,
        code: SecurityErrorKind,
        *error_messages: str,
    ) -> TokenValidationResult:
        return cls(is_success=False, code=code, error_messages=error_messages)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    def __bool__(self) -> bool:
        return self.is_success


@dataclass(frozen=True)
class TokenResult:
    """Outcome of issuing a token."""

    is_success: bool
    _token: str | None = None
    code: SecurityErrorKind | None = None
    error_messages: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls, token: str) -> TokenResult:
        if not token:
            msg = "Token result cannot be set to success with an empty token"
            raise ResultContractError(msg)
        return cls(is_success=True, _token=token)

    @classmethod
    def failure(cls, code: SecurityErrorKind, *error_messages: str) -> TokenResult:
        return cls(is_success=False, code=code, error_messages=error_messages)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def token(self) -> str:
        if not self.is_success or not self._token:
            msg = "No token exists because the operation failed"
            raise ResultContractError(msg)
        return self._token

    def __bool__(self) -> bool:
        return self.is_success

    def __repr__(self) -> str:
        # Never echo the token itself
        if self.is_success:
            return "TokenResult(success=True)"
        return (
            f"TokenResult(success=False, code={self.code}, "
            f"error_messages={list(self.error_messages)})"
        )
