"""Unit tests for request and response models."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from userauth.schemas import (
    LoginRequest,
    LoginResponse,
    RegistrationRequest,
    validation_messages,
)


def _messages(model, data) -> list[str]:
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(data)
    return validation_messages(exc_info.value)


class TestRegistrationRequest:
    """Tests for RegistrationRequest validation."""

    def test_valid_request(self):
        """Test that a complete request validates."""
        request = RegistrationRequest(
            email=" test@gmail.com ",
            password="test123",
            confirm_password="test123",
        )

        assert request.email == "test@gmail.com"
        assert request.username is None

    def test_invalid_email(self):
        """Test that a malformed email is reported."""
        messages = _messages(
            RegistrationRequest,
            {"email": "nope", "password": "x", "confirm_password": "x"},
        )

        assert messages == ["Invalid email address."]

    def test_errors_are_aggregated(self):
        """Test that every field error is reported at once."""
        messages = _messages(
            RegistrationRequest,
            {"email": "nope", "password": "   "},
        )

        assert "Invalid email address." in messages
        assert "Password is required." in messages
        assert "Confirm password is required." in messages
        assert len(messages) == 3

    def test_missing_email(self):
        """Test that a missing email is required."""
        messages = _messages(
            RegistrationRequest,
            {"password": "x", "confirm_password": "x"},
        )

        assert messages == ["Email is required."]

    def test_passwords_must_match(self):
        """Test the confirmation check."""
        messages = _messages(
            RegistrationRequest,
            {"email": "a@b.de", "password": "abc", "confirm_password": "abd"},
        )

        assert messages == ["Passwords do not match."]

    def test_mismatch_reported_with_email_error(self):
        """Test that a password mismatch is reported alongside a bad email."""
        messages = _messages(
            RegistrationRequest,
            {"email": "not-an-email", "password": "abc123", "confirm_password": "zzz"},
        )

        assert messages == ["Invalid email address.", "Passwords do not match."]

    def test_blank_username_is_none(self):
        """Test that a blank username falls back to none."""
        request = RegistrationRequest(
            email="a@b.de",
            username="  ",
            password="x",
            confirm_password="x",
        )

        assert request.username is None

    def test_type_errors_are_labelled(self):
        """Test that pydantic messages are prefixed with the field label."""
        messages = _messages(
            RegistrationRequest,
            {"email": "a@b.de", "username": 12, "password": "x", "confirm_password": "x"},
        )

        assert len(messages) == 1
        assert messages[0].startswith("Username: ")

    def test_instances_are_revalidated(self):
        """Test that a constructed instance is validated again."""
        request = RegistrationRequest.model_construct(
            email="nope",
            username=None,
            password="x",
            confirm_password="x",
        )

        with pytest.raises(ValidationError):
            RegistrationRequest.model_validate(request)

    def test_repr_hides_password(self):
        """Test that passwords never appear in the repr."""
        request = RegistrationRequest(
            email="a@b.de",
            password="Sup3rSecret",
            confirm_password="Sup3rSecret",
        )

        assert "Sup3rSecret" not in repr(request)

    def test_frozen(self):
        """Test that requests are immutable."""
        request = RegistrationRequest(
            email="a@b.de",
            password="x",
            confirm_password="x",
        )

        with pytest.raises(ValidationError):
            request.email = "b@c.de"


class TestLoginRequest:
    """Tests for LoginRequest validation."""

    def test_email_takes_precedence(self):
        """Test that email wins over username."""
        request = LoginRequest(email="a@b.de", username="alice", password="x")

        assert request.identifier == "a@b.de"

    def test_username_only(self):
        """Test logging in by username."""
        request = LoginRequest(username="alice", password="x")

        assert request.identifier == "alice"

    def test_no_identifier(self):
        """Test that blank identifiers become none."""
        request = LoginRequest(email="", username=" ", password="x")

        assert request.identifier is None

    def test_password_required(self):
        """Test that the password is required."""
        assert _messages(LoginRequest, {"email": "a@b.de"}) == [
            "Password is required.",
        ]
        assert _messages(LoginRequest, {"email": "a@b.de", "password": ""}) == [
            "Password is required.",
        ]


class TestResponses:
    """Tests for response models."""

    def test_login_response_hides_token(self):
        """Test that the token is not part of the repr or str."""
        response = LoginResponse(
            user_id=uuid4(),
            token="header.payload.signature",
            expires_at=datetime.now(tz=timezone.utc),
        )

        assert "header.payload.signature" not in repr(response)
        assert "header.payload.signature" not in str(response)
