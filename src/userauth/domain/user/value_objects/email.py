"""Email value object.

Provides validated, normalized email addresses for user identification.
"""

import re
from dataclasses import dataclass

from userauth.domain.user.exceptions import InvalidEmailError

# Local part is either quoted, or a dot-atom that starts and ends with an
# alphanumeric and never holds two dots in a row. Domain is one or more
# labels followed by an alphabetic TLD of 2-63 characters.
EMAIL_PATTERN = re.compile(
    r"^(?:\"[^\"]+?\"|[0-9a-zA-Z](?:\.(?!\.)|[-!#$%&'*+/=?^`{}|~\w])*(?<=[0-9a-zA-Z]))"
    r"@(?:[0-9a-zA-Z][\w-]*\.)+[a-zA-Z]{2,63}$",
)


def normalize_identifier(value: str) -> str:
    """Normalize an email or username for case-insensitive lookups."""
    return value.strip().casefold()


def is_valid_email(value: str) -> bool:
    return bool(value) and EMAIL_PATTERN.match(value.strip()) is not None


@dataclass(frozen=True)
class Email:
    """Value object representing a validated email address."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)

        stripped = self.value.strip()
        if not EMAIL_PATTERN.match(stripped):
            msg = f"Invalid email format: {self.value}"
            raise InvalidEmailError(msg)

        # Replace value with normalized version (frozen dataclass workaround)
        object.__setattr__(self, "value", stripped.lower())

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
