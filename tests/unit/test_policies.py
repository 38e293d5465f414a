"""Unit tests for the policy objects."""

from datetime import timedelta

import pytest

from userauth.policies import (
    DEFAULT_ALLOWED_USERNAME_CHARACTERS,
    IdentityPolicy,
    LockoutPolicy,
    PasswordPolicy,
    TokenPolicy,
    UserPolicy,
)


class TestPasswordPolicy:
    """Tests for PasswordPolicy clamping."""

    def test_defaults(self):
        """Test the default password rules."""
        policy = PasswordPolicy()

        assert policy.require_digit is True
        assert policy.require_lowercase is True
        assert policy.require_uppercase is True
        assert policy.require_non_alphanumeric is False
        assert policy.required_length == 6
        assert policy.required_unique_chars == 2

    def test_required_length_has_floor(self):
        """Test that lengths below the minimum are raised to it."""
        policy = PasswordPolicy(required_length=1)

        assert policy.required_length == PasswordPolicy.MIN_REQUIRED_LENGTH

    def test_unique_chars_clamped_to_length(self):
        """Test that unique characters never exceed the length."""
        policy = PasswordPolicy(required_length=6, required_unique_chars=10)

        assert policy.required_unique_chars == 6

    def test_unique_chars_has_floor(self):
        """Test that unique characters below the minimum are raised."""
        policy = PasswordPolicy(required_unique_chars=0)

        assert policy.required_unique_chars == PasswordPolicy.MIN_UNIQUE_CHARS

    def test_shrinking_length_reclamps_unique_chars(self):
        """Test that lowering the length also lowers unique characters."""
        policy = PasswordPolicy(required_length=10, required_unique_chars=8)

        policy.required_length = 5

        assert policy.required_unique_chars == 5

    def test_unique_chars_never_exceed_length_after_any_sequence(self):
        """Test the invariant over interleaved assignments."""
        policy = PasswordPolicy()
        values = [-3, 0, 2, 4, 7, 12, 30, 5, 1]

        for length in values:
            for unique in values:
                policy.required_length = length
                assert policy.required_unique_chars <= policy.required_length
                policy.required_unique_chars = unique
                assert policy.required_unique_chars <= policy.required_length


class TestLockoutPolicy:
    """Tests for LockoutPolicy clamping and derived state."""

    def test_defaults(self):
        """Test the default lockout rules."""
        policy = LockoutPolicy()

        assert policy.max_failed_access_attempts == 5
        assert policy.lockout_duration == timedelta(minutes=15)
        assert policy.allowed_for_new_users is True
        assert policy.enabled is True

    @pytest.mark.parametrize("value", [-1, -5, -1000])
    def test_negative_attempts_clamp_to_zero(self, value):
        """Test that negative attempt thresholds clamp to zero."""
        policy = LockoutPolicy(max_failed_access_attempts=value)

        assert policy.max_failed_access_attempts == 0

    def test_negative_duration_clamps_to_zero(self):
        """Test that negative durations clamp to zero."""
        policy = LockoutPolicy(lockout_duration=timedelta(minutes=-3))

        assert policy.lockout_duration == timedelta(0)

    @pytest.mark.parametrize(
        ("attempts", "duration", "enabled"),
        [
            (0, timedelta(0), False),
            (3, timedelta(0), False),
            (0, timedelta(minutes=5), False),
            (-2, timedelta(minutes=5), False),
            (3, timedelta(minutes=-5), False),
            (1, timedelta(milliseconds=1), True),
            (3, timedelta(minutes=5), True),
        ],
    )
    def test_enabled_requires_both_thresholds(self, attempts, duration, enabled):
        """Test that lockout is enabled only with attempts and duration."""
        policy = LockoutPolicy(
            max_failed_access_attempts=attempts,
            lockout_duration=duration,
        )

        assert policy.enabled is enabled

    @pytest.mark.parametrize("minutes", [1, 5, 15, 90])
    def test_minutes_round_trip(self, minutes):
        """Test that whole minutes read back unchanged."""
        policy = LockoutPolicy()

        policy.default_lockout_in_minutes = minutes

        assert policy.default_lockout_in_minutes == minutes
        assert policy.lockout_duration == timedelta(minutes=minutes)

    def test_minutes_are_rounded_up(self):
        """Test that a partial minute counts as a whole one."""
        policy = LockoutPolicy(lockout_duration=timedelta(minutes=4, seconds=1))

        assert policy.default_lockout_in_minutes == 5

    def test_negative_minutes_disable_lockout(self):
        """Test that negative minutes clamp the duration to zero."""
        policy = LockoutPolicy()

        policy.default_lockout_in_minutes = -5

        assert policy.lockout_duration == timedelta(0)
        assert policy.enabled is False

    def test_last_assignment_wins(self):
        """Test that minutes and duration overwrite each other."""
        policy = LockoutPolicy()

        policy.default_lockout_in_minutes = 10
        policy.lockout_duration = timedelta(minutes=3)
        assert policy.default_lockout_in_minutes == 3

        policy.default_lockout_in_minutes = 7
        assert policy.lockout_duration == timedelta(minutes=7)


class TestUserPolicy:
    """Tests for UserPolicy."""

    def test_empty_characters_fall_back_to_default(self):
        """Test that an empty allow-list restores the default."""
        policy = UserPolicy("")

        assert policy.allowed_username_characters == DEFAULT_ALLOWED_USERNAME_CHARACTERS

    def test_is_allowed_username(self):
        """Test the default character allow-list."""
        policy = UserPolicy()

        assert policy.is_allowed_username("john.doe-1_x@example.com")
        assert not policy.is_allowed_username("john doe")
        assert not policy.is_allowed_username("jöhn")

    def test_custom_characters(self):
        """Test a restricted allow-list."""
        policy = UserPolicy("abc")

        assert policy.is_allowed_username("cab")
        assert not policy.is_allowed_username("abcd")


class TestIdentityPolicy:
    """Tests for IdentityPolicy."""

    def test_defaults_are_created(self):
        """Test that missing parts get default policies."""
        policy = IdentityPolicy()

        assert isinstance(policy.password, PasswordPolicy)
        assert isinstance(policy.lockout, LockoutPolicy)
        assert isinstance(policy.user, UserPolicy)


class TestTokenPolicy:
    """Tests for TokenPolicy."""

    def test_defaults(self):
        """Test the default token settings."""
        policy = TokenPolicy(secret="s")

        assert policy.expires_in_minutes == 20
        assert policy.clock_skew == timedelta(minutes=5)
        assert policy.validate_issuer is False
        assert policy.validate_audience is False

    def test_validation_flags_follow_values(self):
        """Test that issuer and audience flags track their values."""
        policy = TokenPolicy(secret="s", issuer="issuer", audience="audience")

        assert policy.validate_issuer is True
        assert policy.validate_audience is True

        policy.issuer = ""
        policy.audience = None

        assert policy.validate_issuer is False
        assert policy.validate_audience is False
        assert policy.audience == ""

    def test_negative_expiry_clamps_to_zero(self):
        """Test that negative lifetimes clamp to zero."""
        policy = TokenPolicy(secret="s", expires_in_minutes=-10)

        assert policy.expires_in_minutes == 0

    def test_negative_clock_skew_clamps_to_zero(self):
        """Test that negative clock skew clamps to zero."""
        policy = TokenPolicy(secret="s", clock_skew=timedelta(seconds=-30))

        assert policy.clock_skew == timedelta(0)

    def test_clock_skew_minutes_round_up(self):
        """Test that clock skew minutes use the ceiling."""
        policy = TokenPolicy(secret="s", clock_skew=timedelta(seconds=61))

        assert policy.clock_skew_in_minutes == 2

        policy.clock_skew_in_minutes = 3
        assert policy.clock_skew == timedelta(minutes=3)

    def test_repr_hides_secret(self):
        """Test that the secret never appears in the repr."""
        policy = TokenPolicy(secret="super-secret-value")

        assert "super-secret-value" not in repr(policy)
