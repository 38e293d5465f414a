"""User domain: accounts, emails and the lockout state they carry."""

from userauth.domain.user.aggregates import UserAccount
from userauth.domain.user.exceptions import InvalidEmailError
from userauth.domain.user.value_objects import (
    Email,
    is_valid_email,
    normalize_identifier,
)

__all__ = [
    "Email",
    "InvalidEmailError",
    "UserAccount",
    "is_valid_email",
    "normalize_identifier",
]
