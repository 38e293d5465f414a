"""Account registration and login.

Login is a small state machine per account:

    resolve user -> lockout check -> password check
        -> mismatch: count the failure (may lock), fail
        -> match: reset the counter, issue a token

The lockout check always runs before the password is looked at, so a
locked-out account gets no feedback on its credentials. Expected failures
are returned as ``Result.failure``; collaborator exceptions are logged and
turned into a generic failure, so nothing raises across this service.
"""

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from userauth import audit
from userauth.domain.shared.time import utc_now
from userauth.domain.user import InvalidEmailError, UserAccount
from userauth.policies import IdentityPolicy
from userauth.repositories import UserStore
from userauth.result import Outcome, Result
from userauth.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterResponse,
    RegistrationRequest,
    validation_messages,
)
from userauth.services.policy_validator import USER_ALREADY_EXISTS, PolicyValidator
from userauth.services.token_service import TokenService

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)

REQUEST_REQUIRED = "A request is required."
INVALID_EMAIL = "Invalid email address."
PROVIDE_IDENTIFIER = "Please provide a valid email or username."
USER_NOT_FOUND = "Could not find user with the provided credentials."
USER_LOCKED_OUT = (
    "The user has been temporarily locked out due to multiple failed login "
    "attempts. Please try again later."
)
INVALID_PASSWORD = "Invalid password. Please check your credentials and try again."
UNEXPECTED_ERROR = "An unexpected error occurred. Please try again later."
REGISTRATION_ERROR = (
    "An error occurred while creating your account. Please try again later."
)


class AccountService:
    """Register accounts and log them in.

    Parameters
    ----------
    user_store
        Persistence for accounts, password hashes and lockout counters
    token_service
        Issues the token returned by a successful login
    identity_policy
        Password, lockout and user name rules
    """

    def __init__(
        self,
        user_store: UserStore,
        token_service: TokenService,
        identity_policy: IdentityPolicy,
    ):
        self._user_store = user_store
        self._token_service = token_service
        self._policy = identity_policy
        self._validator = PolicyValidator(identity_policy)

    async def register_user(
        self,
        request: RegistrationRequest | Mapping[str, Any] | None,
    ) -> Result[RegisterResponse]:
        """Create a new account.

        Request errors are reported all at once. After that the checks stop
        at the first failure: duplicate email or username (ignoring case),
        then the password and length rules, then the store itself.
        """
        parsed = self._parse(RegistrationRequest, request)
        if parsed.is_failure:
            return Result.failure(*parsed.errors)
        req = parsed.data

        try:
            user = UserAccount.create(
                email=req.email,
                username=req.username,
                lockout_enabled=self._policy.lockout.allowed_for_new_users,
            )
        except InvalidEmailError:
            audit.log_validation_failed(logger, "RegistrationRequest", INVALID_EMAIL)
            return Result.failure(INVALID_EMAIL)

        try:
            if await self._identity_taken(user):
                audit.log_create_user_result(
                    logger,
                    False,
                    user.email,
                    USER_ALREADY_EXISTS,
                )
                return Result.failure(USER_ALREADY_EXISTS)

            policy_outcome = self._validator.validate(
                req.email,
                req.password,
                user.username if req.username else None,
            )
            if policy_outcome.is_failure:
                audit.log_create_user_result(
                    logger,
                    False,
                    user.email,
                    ", ".join(policy_outcome.errors),
                )
                return Result.failure(*policy_outcome.errors)

            created = await self._user_store.create(user, req.password)
        except Exception as e:
            audit.log_operation_error(logger, "create_user", user.email, e)
            return Result.failure(REGISTRATION_ERROR)

        if created.is_failure:
            audit.log_create_user_result(
                logger,
                False,
                user.email,
                ", ".join(created.errors),
            )
            return Result.failure(*created.errors)

        audit.log_create_user_result(logger, True, user.email)
        return Result.success(
            RegisterResponse(
                user_id=user.id,
                email=user.email,
                username=user.username,
            ),
        )

    async def login_user(
        self,
        request: LoginRequest | Mapping[str, Any] | None,
    ) -> Result[LoginResponse]:
        """Verify credentials and issue a token.

        Email takes precedence over username when both are given.
        """
        parsed = self._parse(LoginRequest, request)
        if parsed.is_failure:
            return Result.failure(*parsed.errors)
        req = parsed.data

        identifier = req.identifier
        if identifier is None:
            audit.log_argument_null(logger, "email", "username")
            return Result.failure(PROVIDE_IDENTIFIER)

        try:
            user = await self._find_user(req)
        except Exception as e:
            audit.log_operation_error(logger, "find_user", identifier, e)
            return Result.failure(UNEXPECTED_ERROR)

        if user is None:
            return Result.failure(USER_NOT_FOUND)

        lockout = await self._check_lockout(user)
        if lockout.is_failure:
            return Result.failure(*lockout.errors)

        password = await self._check_password(user, req.password)
        if password.is_failure:
            return Result.failure(*password.errors)

        try:
            reset = await self._user_store.reset_access_failed_count(user)
        except Exception as e:
            audit.log_operation_error(logger, "reset_access_failed", user.email, e)
            return Result.failure(UNEXPECTED_ERROR)

        # The password was right; a failed reset only delays the next lockout
        audit.log_reset_access_failed_result(
            logger,
            reset.is_success,
            user.email,
            ", ".join(reset.errors),
        )

        return self._issue_token(user)

    async def _identity_taken(self, user: UserAccount) -> bool:
        if await self._user_store.find_by_email(user.email) is not None:
            return True
        return await self._user_store.find_by_name(user.username) is not None

    async def _find_user(self, req: LoginRequest) -> UserAccount | None:
        if req.email:
            user = await self._user_store.find_by_email(req.email)
            audit.log_find_by_email_result(logger, user is not None, req.email)
            return user

        user = await self._user_store.find_by_name(req.username or "")
        audit.log_find_by_name_result(logger, user is not None, req.username or "")
        return user

    async def _check_lockout(self, user: UserAccount) -> Outcome:
        if not self._policy.lockout.enabled:
            audit.log_is_locked_out_result(logger, False, user.email)
            return Outcome.success()

        try:
            locked_out = await self._user_store.is_locked_out(user)
        except Exception as e:
            # A broken store must never let a user in
            audit.log_operation_error(logger, "is_locked_out", user.email, e)
            return Outcome.failure(UNEXPECTED_ERROR)

        audit.log_is_locked_out_result(logger, locked_out, user.email)
        if locked_out:
            return Outcome.failure(USER_LOCKED_OUT)
        return Outcome.success()

    async def _check_password(self, user: UserAccount, password: str) -> Outcome:
        try:
            matches = await self._user_store.check_password(user, password)
        except Exception as e:
            audit.log_operation_error(logger, "check_password", user.email, e)
            return Outcome.failure(UNEXPECTED_ERROR)

        audit.log_check_password_result(logger, matches, user.email)
        if matches:
            return Outcome.success()

        try:
            counted = await self._user_store.access_failed(user)
            audit.log_access_failed_result(
                logger,
                counted.is_success,
                user.email,
                ", ".join(counted.errors),
            )
        except Exception as e:
            audit.log_operation_error(logger, "access_failed", user.email, e)

        return Outcome.failure(INVALID_PASSWORD)

    def _issue_token(self, user: UserAccount) -> Result[LoginResponse]:
        expires_at = utc_now() + timedelta(
            minutes=self._token_service.policy.expires_in_minutes,
        )
        claims = [
            ("sub", str(user.id)),
            ("email", user.email),
            ("unique_name", user.username),
            ("jti", uuid4().hex),
        ]

        try:
            token = self._token_service.generate_token(claims, expires=expires_at)
        except Exception as e:
            audit.log_operation_error(logger, "generate_token", user.email, e)
            return Result.failure(UNEXPECTED_ERROR)

        if token.is_failure:
            return Result.failure(*token.error_messages)

        return Result.success(
            LoginResponse(user_id=user.id, token=token.token, expires_at=expires_at),
        )

    @staticmethod
    def _parse(
        model: type[RequestT],
        request: RequestT | Mapping[str, Any] | None,
    ) -> Result[RequestT]:
        if request is None:
            audit.log_argument_null(logger, "request")
            return Result.failure(REQUEST_REQUIRED)

        try:
            return Result.success(model.model_validate(request))
        except ValidationError as e:
            messages = validation_messages(e)
            audit.log_validation_failed(logger, model.__name__, *messages)
            return Result.failure(*messages)
