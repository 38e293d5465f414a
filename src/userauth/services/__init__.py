"""Authentication services."""

from userauth.services.password_service import PasswordHashingService
from userauth.services.policy_validator import PolicyValidator
from userauth.services.token_service import TokenService

__all__ = [
    "PasswordHashingService",
    "PolicyValidator",
    "TokenService",
]
