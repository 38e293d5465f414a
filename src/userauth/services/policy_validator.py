"""Registration policy checks.

Checks run in a fixed order and stop at the first violation:

1. minimum length
2. lowercase, uppercase, digit, non-alphanumeric character classes
3. number of unique characters
4. email, username and password length caps
5. allowed username characters, when a username is given
"""

from userauth.policies import IdentityPolicy
from userauth.result import Outcome

MAX_FIELD_LENGTH = 255

USER_ALREADY_EXISTS = "User already exists!"

EMAIL_TOO_LONG = "Email is too long!"
USERNAME_TOO_LONG = "Username is too long!"
PASSWORD_TOO_LONG = "Password is too long!"
PASSWORD_REQUIRES_LOWERCASE = "Password requires a lowercase character!"
PASSWORD_REQUIRES_UPPERCASE = "Password requires an uppercase character!"
PASSWORD_REQUIRES_DIGIT = "Password requires a digit!"
PASSWORD_REQUIRES_NON_ALPHANUMERIC = "Password requires a non-alphanumeric character!"
USERNAME_INVALID_CHARACTERS = "Username contains invalid characters!"


def password_too_short(required_length: int) -> str:
    return f"Password must be at least {required_length} characters long!"


def password_needs_unique_chars(required_unique_chars: int) -> str:
    return f"Password requires at least {required_unique_chars} unique characters!"


class PolicyValidator:
    """Evaluate a registration against the configured identity policy."""

    def __init__(self, policy: IdentityPolicy):
        self._policy = policy

    def validate_password(self, password: str) -> Outcome:
        rules = self._policy.password

        if len(password) < rules.required_length:
            return Outcome.failure(password_too_short(rules.required_length))

        if rules.require_lowercase and not any(c.islower() for c in password):
            return Outcome.failure(PASSWORD_REQUIRES_LOWERCASE)

        if rules.require_uppercase and not any(c.isupper() for c in password):
            return Outcome.failure(PASSWORD_REQUIRES_UPPERCASE)

        if rules.require_digit and not any(c.isdigit() for c in password):
            return Outcome.failure(PASSWORD_REQUIRES_DIGIT)

        if rules.require_non_alphanumeric and all(c.isalnum() for c in password):
            return Outcome.failure(PASSWORD_REQUIRES_NON_ALPHANUMERIC)

        if len(set(password)) < rules.required_unique_chars:
            return Outcome.failure(
                password_needs_unique_chars(rules.required_unique_chars),
            )

        return Outcome.success()

    def validate(
        self,
        email: str,
        password: str,
        username: str | None = None,
    ) -> Outcome:
        """Check a registration. A missing username defaults to the email."""
        password_outcome = self.validate_password(password)
        if not password_outcome:
            return password_outcome

        if len(email) > MAX_FIELD_LENGTH:
            return Outcome.failure(EMAIL_TOO_LONG)

        if username is not None and len(username) > MAX_FIELD_LENGTH:
            return Outcome.failure(USERNAME_TOO_LONG)

        if len(password) > MAX_FIELD_LENGTH:
            return Outcome.failure(PASSWORD_TOO_LONG)

        if username is not None and not self._policy.user.is_allowed_username(
            username,
        ):
            return Outcome.failure(USERNAME_INVALID_CHARACTERS)

        return Outcome.success()
