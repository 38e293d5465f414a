"""Request and response models for the account service."""

from datetime import datetime
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from userauth.domain.user import is_valid_email

FIELD_LABELS = {
    "email": "Email",
    "username": "Username",
    "password": "Password",
    "confirm_password": "Confirm password",
}

# Error types raised by our own validators; their messages are user-facing
_CUSTOM_ERROR_TYPES = frozenset({"invalid_email", "required", "password_mismatch"})


def _label(field_name: str | None) -> str:
    if not field_name:
        return "Value"
    return FIELD_LABELS.get(field_name, field_name.replace("_", " ").capitalize())


def _required(value: str | None, info: ValidationInfo) -> str:
    if value is None or not value.strip():
        raise PydanticCustomError(
            "required",
            "{label} is required.",
            {"label": _label(info.field_name)},
        )
    return value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class RegistrationRequest(BaseModel):
    """Request to create an account.

    ``username`` defaults to the email when omitted.
    """

    email: str = Field(..., description="User's email address")
    username: str | None = Field(default=None, description="Optional user name")
    password: str = Field(..., description="Plaintext password")
    confirm_password: str = Field(..., description="Must equal password")

    model_config = ConfigDict(
        frozen=True,
        revalidate_instances="always",
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "Secure123",
                "confirm_password": "Secure123",
            },
        },
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str, info: ValidationInfo) -> str:
        v = _required(v, info).strip()
        if not is_valid_email(v):
            raise PydanticCustomError("invalid_email", "Invalid email address.")
        return v

    @field_validator("username", mode="before")
    @classmethod
    def empty_username_is_none(cls, v: object) -> object:
        return _blank_to_none(v)

    @field_validator("password")
    @classmethod
    def validate_required(cls, v: str, info: ValidationInfo) -> str:
        return _required(v, info)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        v = _required(v, info)
        # Runs with the other field checks; skipped when password itself failed
        password = info.data.get("password")
        if password is not None and password != v:
            raise PydanticCustomError("password_mismatch", "Passwords do not match.")
        return v

    def __repr__(self) -> str:
        return f"RegistrationRequest(email={self.email}, username={self.username})"


class LoginRequest(BaseModel):
    """Request to log in by email or username.

    Email takes precedence when both are given.
    """

    email: str | None = Field(default=None, description="User's email address")
    username: str | None = Field(default=None, description="User name")
    password: str = Field(..., description="Plaintext password")

    model_config = ConfigDict(
        frozen=True,
        revalidate_instances="always",
        json_schema_extra={
            "example": {"email": "user@example.com", "password": "Secure123"},
        },
    )

    @field_validator("email", "username", mode="before")
    @classmethod
    def empty_identifier_is_none(cls, v: object) -> object:
        return _blank_to_none(v)

    @field_validator("password")
    @classmethod
    def validate_required(cls, v: str, info: ValidationInfo) -> str:
        return _required(v, info)

    @property
    def identifier(self) -> str | None:
        return self.email or self.username

    def __repr__(self) -> str:
        return f"LoginRequest(email={self.email}, username={self.username})"


class RegisterResponse(BaseModel):
    """Confirmation of a created account."""

    user_id: UUID
    email: str
    username: str

    model_config = ConfigDict(frozen=True)


class LoginResponse(BaseModel):
    """Issued token for a successful login."""

    user_id: UUID
    token: str = Field(..., repr=False)
    expires_at: datetime

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"LoginResponse(user_id={self.user_id}, expires_at={self.expires_at})"


def validation_messages(error: ValidationError) -> list[str]:
    """Flatten a pydantic error into one user-facing message per violation."""
    messages = []
    for err in error.errors():
        field_name = str(err["loc"][0]) if err["loc"] else None
        if err["type"] == "missing":
            messages.append(f"{_label(field_name)} is required.")
        elif err["type"] in _CUSTOM_ERROR_TYPES or not field_name:
            messages.append(err["msg"])
        else:
            messages.append(f"{_label(field_name)}: {err['msg']}")
    return messages
