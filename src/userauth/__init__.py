"""userauth - Account registration, login and token authentication.

This package provides the authentication core of an application. It handles:
- Registration against a password, lockout and user name policy
- Login with per-account failed-attempt lockout
- JWT token issuance and validation (HS256)
- Pluggable user storage (in-memory, SQLAlchemy)

Architecture:
    userauth/
    ├── application/        # AccountService (register, login)
    ├── domain/             # UserAccount aggregate, Email value object
    ├── services/           # Pure logic (password hashing, policy, JWT)
    ├── repositories/       # Abstract UserStore interface
    ├── infrastructure/     # UserStore implementations by technology
    │   ├── memory/
    │   └── persistence/sqlalchemy/
    ├── policies.py         # Always-valid policy objects
    ├── result.py           # Result, Outcome and token outcome types
    ├── schemas.py          # Request/response models
    ├── audit.py            # Structured log events
    └── exceptions.py       # Contract and infrastructure exceptions

Usage:
    from userauth import AccountService, InMemoryUserStore, TokenService
    from userauth_config import get_settings

    settings = get_settings()
    policy = settings.identity_policy()
    service = AccountService(
        InMemoryUserStore(policy.lockout),
        TokenService(settings.token_policy()),
        policy,
    )
    result = await service.login_user({"email": "a@b.de", "password": "..."})
"""

from userauth.application.services import AccountService
from userauth.domain.user import Email, InvalidEmailError, UserAccount
from userauth.exceptions import AuthError, ResultContractError, UserStoreError
from userauth.infrastructure.memory import InMemoryUserStore
from userauth.policies import (
    IdentityPolicy,
    LockoutPolicy,
    PasswordPolicy,
    TokenPolicy,
    UserPolicy,
)
from userauth.repositories import UserStore
from userauth.result import (
    Outcome,
    Result,
    SecurityErrorKind,
    TokenResult,
    TokenValidationResult,
)
from userauth.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterResponse,
    RegistrationRequest,
)
from userauth.services import PasswordHashingService, PolicyValidator, TokenService

__all__ = [
    # Services
    "AccountService",
    "PasswordHashingService",
    "PolicyValidator",
    "TokenService",
    # Stores
    "InMemoryUserStore",
    "UserStore",
    # Domain
    "Email",
    "UserAccount",
    # Policies
    "IdentityPolicy",
    "LockoutPolicy",
    "PasswordPolicy",
    "TokenPolicy",
    "UserPolicy",
    # Results
    "Outcome",
    "Result",
    "SecurityErrorKind",
    "TokenResult",
    "TokenValidationResult",
    # Schemas
    "LoginRequest",
    "LoginResponse",
    "RegisterResponse",
    "RegistrationRequest",
    # Exceptions
    "AuthError",
    "InvalidEmailError",
    "ResultContractError",
    "UserStoreError",
]
