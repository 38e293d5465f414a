"""Value objects for the user domain."""

from userauth.domain.user.value_objects.email import (
    EMAIL_PATTERN,
    Email,
    is_valid_email,
    normalize_identifier,
)

__all__ = [
    "EMAIL_PATTERN",
    "Email",
    "is_valid_email",
    "normalize_identifier",
]
