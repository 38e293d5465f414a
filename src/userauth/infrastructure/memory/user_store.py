"""In-memory implementation of UserStore.

Keeps accounts in a dict and hands out snapshots, so callers never share
state with the store. Counter updates on one account are serialised with a
per-account ``asyncio.Lock``; different accounts never block each other.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from userauth.domain.shared.time import utc_now
from userauth.domain.user import UserAccount, normalize_identifier
from userauth.policies import LockoutPolicy
from userauth.repositories import UserStore
from userauth.result import Outcome
from userauth.services.password_service import PasswordHashingService
from userauth.services.policy_validator import USER_ALREADY_EXISTS

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found."


class InMemoryUserStore(UserStore):
    """Dict-backed user store for tests and single-process deployments."""

    def __init__(
        self,
        lockout_policy: LockoutPolicy,
        password_service: PasswordHashingService | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._lockout_policy = lockout_policy
        self._password_service = password_service or PasswordHashingService()
        self._clock = clock
        self._accounts: dict[UUID, UserAccount] = {}
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._create_lock = asyncio.Lock()

    async def create(self, user: UserAccount, password: str) -> Outcome:
        async with self._create_lock:
            if user.id in self._accounts or any(
                existing.matches_identity(user)
                for existing in self._accounts.values()
            ):
                return Outcome.failure(USER_ALREADY_EXISTS)

            stored = self._snapshot(user)
            stored.set_password_hash(self._password_service.hash(password))
            self._accounts[stored.id] = stored
            self._locks[stored.id] = asyncio.Lock()

        logger.info("Created user: %s (email: %s)", user.id, user.email)
        return Outcome.success()

    async def check_password(self, user: UserAccount, password: str) -> bool:
        stored = self._accounts.get(user.id)
        if stored is None:
            return False
        return self._password_service.verify(password, stored.password_hash)

    async def find_by_id(self, user_id: UUID | str) -> UserAccount | None:
        key = user_id if isinstance(user_id, UUID) else UUID(str(user_id))
        stored = self._accounts.get(key)
        return self._snapshot(stored) if stored else None

    async def find_by_email(self, email: str) -> UserAccount | None:
        normalized = normalize_identifier(email)
        for stored in self._accounts.values():
            if stored.normalized_email == normalized:
                return self._snapshot(stored)
        return None

    async def find_by_name(self, username: str) -> UserAccount | None:
        normalized = normalize_identifier(username)
        for stored in self._accounts.values():
            if stored.normalized_username == normalized:
                return self._snapshot(stored)
        return None

    async def is_locked_out(self, user: UserAccount) -> bool:
        stored = self._accounts.get(user.id)
        if stored is None:
            return False
        return stored.is_locked_out(self._clock())

    async def access_failed(self, user: UserAccount) -> Outcome:
        stored = self._accounts.get(user.id)
        if stored is None:
            return Outcome.failure(USER_NOT_FOUND)

        async with self._locks[user.id]:
            locked = stored.record_failed_access(
                self._lockout_policy.max_failed_access_attempts,
                self._lockout_policy.lockout_duration,
                self._clock(),
            )

        if locked:
            logger.warning(
                "Account locked for user %s due to %d failed attempts",
                user.id,
                stored.access_failed_count,
            )
        return Outcome.success()

    async def reset_access_failed_count(self, user: UserAccount) -> Outcome:
        stored = self._accounts.get(user.id)
        if stored is None:
            return Outcome.failure(USER_NOT_FOUND)

        async with self._locks[user.id]:
            stored.reset_access_failed_count()
        return Outcome.success()

    async def get_access_failed_count(self, user: UserAccount) -> int:
        stored = self._accounts.get(user.id)
        return stored.access_failed_count if stored else 0

    @staticmethod
    def _snapshot(user: UserAccount) -> UserAccount:
        return UserAccount.reconstitute(
            id=user.id,
            email=user.email,
            username=user.username,
            password_hash=user.password_hash,
            access_failed_count=user.access_failed_count,
            lockout_end=user.lockout_end,
            lockout_enabled=user.lockout_enabled,
            created_at=user.created_at,
        )
