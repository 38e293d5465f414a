"""SQLAlchemy implementation of UserStore."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Executable, Result, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from userauth.domain.shared.time import ensure_tz_aware, utc_now
from userauth.domain.user import UserAccount, normalize_identifier
from userauth.exceptions import UserStoreError
from userauth.infrastructure.persistence.sqlalchemy.models import UserAccountModel
from userauth.policies import LockoutPolicy
from userauth.repositories import UserStore
from userauth.result import Outcome
from userauth.services.password_service import PasswordHashingService
from userauth.services.policy_validator import USER_ALREADY_EXISTS

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found."


class UserStoreSQLAlchemy(UserStore):
    """SQLAlchemy implementation of the UserStore interface.

    The failed access counter is incremented with a single ``UPDATE ... SET
    access_failed_count = access_failed_count + 1`` so concurrent failures
    on one account are never lost. The session is flushed, not committed;
    the caller owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        lockout_policy: LockoutPolicy,
        password_service: PasswordHashingService | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session = session
        self._lockout_policy = lockout_policy
        self._password_service = password_service or PasswordHashingService()
        self._clock = clock

    async def create(self, user: UserAccount, password: str) -> Outcome:
        if await self._identity_exists(user):
            return Outcome.failure(USER_ALREADY_EXISTS)

        model = self._map_to_model(user)
        model.password_hash = self._password_service.hash(password)

        try:
            # The savepoint confines a failed insert; the caller's pending
            # work in the same transaction is kept
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError:
            # Lost a race against a concurrent registration
            logger.warning("Duplicate user rejected on flush: %s", user.email)
            return Outcome.failure(USER_ALREADY_EXISTS)
        except SQLAlchemyError as e:
            msg = f"Could not create user {user.id}"
            raise UserStoreError(msg) from e

        user.set_password_hash(model.password_hash)
        logger.info("Created user: %s (email: %s)", user.id, user.email)
        return Outcome.success()

    async def check_password(self, user: UserAccount, password: str) -> bool:
        model = await self._find_model_by_id(user.id)
        if model is None:
            return False
        return self._password_service.verify(password, model.password_hash)

    async def find_by_id(self, user_id: UUID | str) -> UserAccount | None:
        key = user_id if isinstance(user_id, UUID) else UUID(str(user_id))
        model = await self._find_model_by_id(key)
        return self._map_to_domain(model) if model else None

    async def find_by_email(self, email: str) -> UserAccount | None:
        stmt = select(UserAccountModel).where(
            UserAccountModel.normalized_email == normalize_identifier(email),
        )
        model = (await self._execute(stmt)).scalar_one_or_none()
        return self._map_to_domain(model) if model else None

    async def find_by_name(self, username: str) -> UserAccount | None:
        stmt = select(UserAccountModel).where(
            UserAccountModel.normalized_username == normalize_identifier(username),
        )
        model = (await self._execute(stmt)).scalar_one_or_none()
        return self._map_to_domain(model) if model else None

    async def is_locked_out(self, user: UserAccount) -> bool:
        model = await self._find_model_by_id(user.id)
        if model is None:
            return False
        return self._map_to_domain(model).is_locked_out(self._clock())

    async def access_failed(self, user: UserAccount) -> Outcome:
        increment = (
            update(UserAccountModel)
            .where(UserAccountModel.id == user.id)
            .values(access_failed_count=UserAccountModel.access_failed_count + 1)
        )
        result = await self._execute(increment)
        if result.rowcount == 0:
            return Outcome.failure(USER_NOT_FOUND)

        policy = self._lockout_policy
        if policy.enabled:
            lock = (
                update(UserAccountModel)
                .where(
                    UserAccountModel.id == user.id,
                    UserAccountModel.access_failed_count
                    >= policy.max_failed_access_attempts,
                )
                .values(lockout_end=self._clock() + policy.lockout_duration)
            )
            if (await self._execute(lock)).rowcount:
                logger.warning(
                    "Account locked for user %s after %d failed attempts",
                    user.id,
                    policy.max_failed_access_attempts,
                )

        await self._flush()
        return Outcome.success()

    async def reset_access_failed_count(self, user: UserAccount) -> Outcome:
        stmt = (
            update(UserAccountModel)
            .where(UserAccountModel.id == user.id)
            .values(access_failed_count=0, lockout_end=None)
        )
        result = await self._execute(stmt)
        if result.rowcount == 0:
            return Outcome.failure(USER_NOT_FOUND)

        await self._flush()
        return Outcome.success()

    async def get_access_failed_count(self, user: UserAccount) -> int:
        model = await self._find_model_by_id(user.id)
        return model.access_failed_count if model else 0

    async def _identity_exists(self, user: UserAccount) -> bool:
        stmt = select(UserAccountModel.id).where(
            (UserAccountModel.id == user.id)
            | (UserAccountModel.normalized_email == user.normalized_email)
            | (UserAccountModel.normalized_username == user.normalized_username),
        )
        return (await self._execute(stmt)).first() is not None

    async def _find_model_by_id(self, user_id: UUID) -> UserAccountModel | None:
        stmt = (
            select(UserAccountModel)
            .where(UserAccountModel.id == user_id)
            # Counters change through UPDATE statements; never trust the
            # identity map for them
            .execution_options(populate_existing=True)
        )
        return (await self._execute(stmt)).scalar_one_or_none()

    async def _execute(self, stmt: Executable) -> Result[Any]:
        try:
            return await self._session.execute(stmt)
        except SQLAlchemyError as e:
            msg = f"User store query failed: {e.__class__.__name__}"
            raise UserStoreError(msg) from e

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            msg = f"User store flush failed: {e.__class__.__name__}"
            raise UserStoreError(msg) from e

    def _map_to_model(self, user: UserAccount) -> UserAccountModel:
        return UserAccountModel(
            id=user.id,
            email=user.email,
            normalized_email=user.normalized_email,
            username=user.username,
            normalized_username=user.normalized_username,
            password_hash=user.password_hash,
            access_failed_count=user.access_failed_count,
            lockout_end=user.lockout_end,
            lockout_enabled=user.lockout_enabled,
            created_at=user.created_at,
            updated_at=user.created_at,
        )

    def _map_to_domain(self, model: UserAccountModel) -> UserAccount:
        # SQLite hands back naive datetimes
        return UserAccount.reconstitute(
            id=model.id,
            email=model.email,
            username=model.username,
            password_hash=model.password_hash,
            access_failed_count=model.access_failed_count,
            lockout_end=ensure_tz_aware(model.lockout_end)
            if model.lockout_end
            else None,
            lockout_enabled=model.lockout_enabled,
            created_at=ensure_tz_aware(model.created_at),
        )
