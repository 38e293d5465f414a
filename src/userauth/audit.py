"""Structured log events for account and token operations.

Every helper emits exactly one record through the caller's logger and
attaches ``event_id``, ``event`` and ``identifier`` as record attributes so
log handlers can index them. Passwords and tokens are never logged.

Levels:
- INFO for successful steps
- WARNING for expected failures (not found, wrong password, locked out)
- ERROR with traceback for infrastructure faults
"""

import logging
from enum import Enum


class AuthEvent(int, Enum):
    """Stable event ids, one pair per operation (success, failure)."""

    ARGUMENT_NULL = 0
    CREATE_USER_SUCCESS = 101
    CREATE_USER_FAILURE = 102
    FIND_BY_EMAIL_SUCCESS = 103
    FIND_BY_EMAIL_FAILURE = 104
    FIND_BY_NAME_SUCCESS = 105
    FIND_BY_NAME_FAILURE = 106
    CHECK_PASSWORD_SUCCESS = 107
    CHECK_PASSWORD_FAILURE = 108
    NOT_LOCKED_OUT = 109
    LOCKED_OUT = 110
    ACCESS_FAILED_SUCCESS = 111
    ACCESS_FAILED_FAILURE = 112
    RESET_ACCESS_FAILED_SUCCESS = 113
    RESET_ACCESS_FAILED_FAILURE = 114
    GENERATE_TOKEN_SUCCESS = 201
    GENERATE_TOKEN_FAILURE = 202
    VALIDATE_TOKEN_SUCCESS = 203
    VALIDATE_TOKEN_FAILURE = 204
    OPERATION_ERROR = 500
    VALIDATION_FAILED = 1693


def _emit(  # noqa: PLR0913
    logger: logging.Logger,
    level: int,
    event: AuthEvent,
    identifier: str,
    message: str,
    *args: object,
    exc_info: BaseException | None = None,
) -> None:
    logger.log(
        level,
        message,
        *args,
        exc_info=exc_info,
        extra={
            "event_id": event.value,
            "event": event.name.lower(),
            "identifier": identifier,
        },
    )


def log_argument_null(logger: logging.Logger, *arguments: str) -> None:
    joined = ", ".join(arguments)
    _emit(
        logger,
        logging.WARNING,
        AuthEvent.ARGUMENT_NULL,
        joined,
        "The following required arguments are null: '%s'.",
        joined,
    )


def log_validation_failed(
    logger: logging.Logger,
    object_name: str,
    *errors: str,
) -> None:
    _emit(
        logger,
        logging.WARNING,
        AuthEvent.VALIDATION_FAILED,
        object_name,
        "Validation failed on object '%s': %s",
        object_name,
        " | ".join(errors),
    )


def log_create_user_result(
    logger: logging.Logger,
    success: bool,
    identifier: str,
    errors: str = "",
) -> None:
    if success:
        _emit(
            logger,
            logging.INFO,
            AuthEvent.CREATE_USER_SUCCESS,
            identifier,
            "Successfully created user '%s'.",
            identifier,
        )
    else:
        _emit(
            logger,
            logging.WARNING,
            AuthEvent.CREATE_USER_FAILURE,
            identifier,
            "Failed to create user '%s'. %s",
            identifier,
            errors,
        )


def log_find_by_email_result(
    logger: logging.Logger,
    success: bool,
    email: str,
    errors: str = "",
) -> None:
    if success:
        _emit(
            logger,
            logging.INFO,
            AuthEvent.FIND_BY_EMAIL_SUCCESS,
            email,
            "User with email '%s' was found.",
            email,
        )
    else:
        _emit(
            logger,
            logging.WARNING,
            AuthEvent.FIND_BY_EMAIL_FAILURE,
            email,
            "No user found with email '%s'. %s",
            email,
            errors,
        )


def log_find_by_name_result(
    logger: logging.Logger,
    success: bool,
    username: str,
    errors: str = "",
) -> None:
    if success:
        _emit(
            logger,
            logging.INFO,
            AuthEvent.FIND_BY_NAME_SUCCESS,
            username,
            "User with username '%s' was found.",
            username,
        )
    else:
        _emit(
            logger,
            logging.WARNING,
            AuthEvent.FIND_BY_NAME_FAILURE,
            username,
            "No user found with username '%s'. %s",
            username,
            errors,
        )


def log_check_password_result(
    logger: logging.Logger,
    success: bool,
    identifier: str,
) -> None:
    if success:
        _emit(
            logger,
            logging.INFO,
            AuthEvent.CHECK_PASSWORD_SUCCESS,
            identifier,
            "User '%s' provided the correct password.",
            identifier,
        )
    else:
        _emit(
            logger,
            logging.WARNING,
            AuthEvent.CHECK_PASSWORD_FAILURE,
            identifier,
            "Incorrect password provided for user '%s'.",
            identifier,
        )


def log_is_locked_out_result(
    logger: logging.Logger,
    is_locked_out: bool,
    identifier: str,
) -> None:
    if is_locked_out:
        _emit(
            logger,
            logging.WARNING,
            AuthEvent.LOCKED_OUT,
            identifier,
            "User '%s' is locked out.",
            identifier,
        )
    else:
        _emit(
            logger,
            logging.INFO,
            AuthEvent.NOT_LOCKED_OUT,
            identifier,
            "User '%s' is not locked out.",
            identifier,
        )


def log_access_failed_result(
    logger: logging.Logger,
    success: bool,
    identifier: str,
    errors: str = "",
) -> None:
    if success:
        _emit(
            logger,
            logging.INFO,
            AuthEvent.ACCESS_FAILED_SUCCESS,
            identifier,
            "User '%s' failed access count has increased.",
            identifier,
        )
    else:
        _emit(
            logger,
            logging.WARNING,
            AuthEvent.ACCESS_FAILED_FAILURE,
            identifier,
            "Could not increase failed access count for user '%s'. %s",
            identifier,
            errors,
        )


def log_reset_access_failed_result(
    logger: logging.Logger,
    success: bool,
    identifier: str,
    errors: str = "",
) -> None:
    if success:
        _emit(
            logger,
            logging.INFO,
            AuthEvent.RESET_ACCESS_FAILED_SUCCESS,
            identifier,
            "User '%s' failed access count was reset.",
            identifier,
        )
    else:
        _emit(
            logger,
            logging.WARNING,
            AuthEvent.RESET_ACCESS_FAILED_FAILURE,
            identifier,
            "Could not reset failed access count for user '%s'. %s",
            identifier,
            errors,
        )


def log_generate_token_result(
    logger: logging.Logger,
    success: bool,
    subject: str,
    errors: str = "",
) -> None:
    if success:
        _emit(
            logger,
            logging.INFO,
            AuthEvent.GENERATE_TOKEN_SUCCESS,
            subject,
            "Issued token for subject '%s'.",
            subject,
        )
    else:
        _emit(
            logger,
            logging.WARNING,
            AuthEvent.GENERATE_TOKEN_FAILURE,
            subject,
            "Could not issue token for subject '%s'. %s",
            subject,
            errors,
        )


def log_validate_token_result(
    logger: logging.Logger,
    success: bool,
    errors: str = "",
) -> None:
    if success:
        _emit(
            logger,
            logging.DEBUG,
            AuthEvent.VALIDATE_TOKEN_SUCCESS,
            "",
            "Token validated.",
        )
    else:
        _emit(
            logger,
            logging.INFO,
            AuthEvent.VALIDATE_TOKEN_FAILURE,
            "",
            "Token rejected. %s",
            errors,
        )


def log_operation_error(
    logger: logging.Logger,
    operation: str,
    identifier: str,
    error: BaseException,
) -> None:
    _emit(
        logger,
        logging.ERROR,
        AuthEvent.OPERATION_ERROR,
        identifier,
        "An error occurred during '%s' for '%s'.",
        operation,
        identifier,
        exc_info=error,
    )
