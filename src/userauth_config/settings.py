"""Authentication settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. USERAUTH_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Nested groups use ``__`` as delimiter, e.g. ``JWT__SECRET`` or
``LOCKOUT__MAX_FAILED_ACCESS_ATTEMPTS``. When passed as a mapping, the
camelCase names (``maxFailedAccessAttempts``) are accepted as well.

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from userauth.policies import (
    DEFAULT_ALLOWED_USERNAME_CHARACTERS,
    IdentityPolicy,
    LockoutPolicy,
    PasswordPolicy,
    TokenPolicy,
    UserPolicy,
)


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent

    return Path.cwd()


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. USERAUTH_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("USERAUTH_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class _Group(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PasswordSettings(_Group):
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    require_non_alphanumeric: bool = False
    required_length: int = 6
    required_unique_chars: int = 2


class LockoutSettings(_Group):
    allowed_for_new_users: bool = True
    max_failed_access_attempts: int = 5
    default_lockout_in_minutes: int | None = None
    default_lockout_time_span: timedelta | None = None


class UserSettings(_Group):
    allowed_username_characters: str = DEFAULT_ALLOWED_USERNAME_CHARACTERS


class JwtSettings(_Group):
    secret: SecretStr
    issuer: str = ""
    audience: str = ""
    expires_in_minutes: int = 20
    clock_skew_in_minutes: int = 5


class Settings(BaseSettings):
    """Authentication configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values

    The settings are plain input; ``identity_policy`` and ``token_policy``
    turn them into the clamped policy objects the services consume.
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Security (MUST be set - JWT__SECRET)
    jwt: JwtSettings

    password: PasswordSettings = Field(default_factory=PasswordSettings)
    lockout: LockoutSettings = Field(default_factory=LockoutSettings)
    user: UserSettings = Field(default_factory=UserSettings)

    # Report the fine-grained token failure kinds to callers
    token_detailed_errors: bool = False

    # Logging
    log_level: str = "INFO"

    def identity_policy(self) -> IdentityPolicy:
        password = PasswordPolicy(
            require_digit=self.password.require_digit,
            require_lowercase=self.password.require_lowercase,
            require_uppercase=self.password.require_uppercase,
            require_non_alphanumeric=self.password.require_non_alphanumeric,
            required_length=self.password.required_length,
            required_unique_chars=self.password.required_unique_chars,
        )

        lockout = LockoutPolicy(
            max_failed_access_attempts=self.lockout.max_failed_access_attempts,
            allowed_for_new_users=self.lockout.allowed_for_new_users,
        )
        # Both forms set the same duration; the time span is applied last
        if self.lockout.default_lockout_in_minutes is not None:
            lockout.default_lockout_in_minutes = (
                self.lockout.default_lockout_in_minutes
            )
        if self.lockout.default_lockout_time_span is not None:
            lockout.lockout_duration = self.lockout.default_lockout_time_span

        user = UserPolicy(self.user.allowed_username_characters)

        return IdentityPolicy(password=password, lockout=lockout, user=user)

    def token_policy(self) -> TokenPolicy:
        policy = TokenPolicy(
            secret=self.jwt.secret.get_secret_value(),
            issuer=self.jwt.issuer,
            audience=self.jwt.audience,
            expires_in_minutes=self.jwt.expires_in_minutes,
        )
        policy.clock_skew_in_minutes = self.jwt.clock_skew_in_minutes
        return policy


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings.

    ``JWT__SECRET`` must be provided via environment variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
