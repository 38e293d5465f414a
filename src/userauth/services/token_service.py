"""JWT token service.

Issues and validates HS256 signed tokens according to a ``TokenPolicy``.
Neither operation raises for expected failures; both report through
``TokenResult`` / ``TokenValidationResult`` with a ``SecurityErrorKind``.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any

import jwt

from userauth import audit
from userauth.domain.shared.time import utc_now
from userauth.policies import TokenPolicy
from userauth.result import (
    Result,
    SecurityErrorKind,
    TokenResult,
    TokenValidationResult,
)

logger = logging.getLogger(__name__)

Claims = Mapping[str, Any] | Iterable[tuple[str, Any]]

MISSING_SECRET = "The token secret is not configured."
GENERATION_FAILED = "An unexpected error occurred while generating the token."
VALIDATION_FAILED = "An unexpected error occurred while validating the token."
TOKEN_EXPIRED = "The token has expired."
TOKEN_INVALID = "The token is invalid."


class TokenService:
    """Service for token creation and verification.

    Examples
    --------
    >>> service = TokenService(TokenPolicy(secret="x" * 32))
    >>> result = service.generate_token({"sub": "42"})
    >>> service.validate_token(result.token).is_success
    True
    """

    ALGORITHM = "HS256"

    def __init__(self, policy: TokenPolicy, detailed_errors: bool = False):
        """Initialize the token service.

        Parameters
        ----------
        policy
            Signing secret, issuer, audience, lifetime and clock skew
        detailed_errors
            Report the fine-grained failure kinds (bad signature, wrong
            issuer, ...) instead of the generic ``INVALID_TOKEN``
        """
        self._policy = policy
        self._detailed_errors = detailed_errors

    @property
    def policy(self) -> TokenPolicy:
        return self._policy

    def generate_token(
        self,
        claims: Claims,
        expires: datetime | None = None,
    ) -> TokenResult:
        """Create a signed token carrying the given claims.

        Parameters
        ----------
        claims
            Mapping or ordered ``(name, value)`` pairs. A name given more
            than once is emitted as a list of its values.
        expires
            Absolute expiry; defaults to now plus ``expires_in_minutes``

        Returns
        -------
        TokenResult holding the encoded token on success
        """
        subject = ""
        if not self._policy.secret:
            audit.log_generate_token_result(logger, False, subject, MISSING_SECRET)
            return TokenResult.failure(
                SecurityErrorKind.INVALID_CONFIGURATION,
                MISSING_SECRET,
            )

        try:
            payload = self._build_payload(claims)
            subject = str(payload.get("sub", ""))
            now = utc_now()
            payload["iat"] = now
            payload["exp"] = expires or now + timedelta(
                minutes=self._policy.expires_in_minutes,
            )
            if self._policy.issuer:
                payload["iss"] = self._policy.issuer
            if self._policy.audience:
                payload["aud"] = self._policy.audience

            token = jwt.encode(
                payload,
                self._policy.secret,
                algorithm=self.ALGORITHM,
            )
        except Exception as e:
            audit.log_operation_error(logger, "generate_token", subject, e)
            return TokenResult.failure(
                SecurityErrorKind.UNEXPECTED_ERROR,
                GENERATION_FAILED,
            )

        audit.log_generate_token_result(logger, True, subject)
        return TokenResult.success(token)

    def validate_token(self, token: str | None) -> TokenValidationResult:
        """Verify signature, lifetime, issuer and audience of a token.

        Validation is stateless; the same token validates any number of
        times until it expires.
        """
        _, result = self._verify(token)
        return result

    def read_claims(self, token: str | None) -> Result[dict[str, Any]]:
        """Return the verified payload of a token.

        Returns
        -------
        Result with the decoded claims, or the validation error messages
        """
        payload, result = self._verify(token)
        if result.is_failure or payload is None:
            return Result.failure(*result.error_messages)
        return Result.success(payload)

    def _verify(
        self,
        token: str | None,
    ) -> tuple[dict[str, Any] | None, TokenValidationResult]:
        if not self._policy.secret:
            audit.log_validate_token_result(logger, False, MISSING_SECRET)
            return None, TokenValidationResult.failure(
                SecurityErrorKind.INVALID_CONFIGURATION,
                MISSING_SECRET,
            )

        if not token:
            return None, self._reject(
                SecurityErrorKind.MISSING_TOKEN,
                "No token was provided.",
            )

        try:
            payload = self._decode(token)
        except jwt.ExpiredSignatureError:
            # Only raised after the signature has been verified
            return None, self._reject(
                SecurityErrorKind.EXPIRED_TOKEN,
                TOKEN_EXPIRED,
                always=True,
            )
        except jwt.InvalidAudienceError:
            return None, self._reject(
                SecurityErrorKind.INVALID_AUDIENCE,
                "The token audience is invalid.",
            )
        except jwt.InvalidIssuerError:
            return None, self._reject(
                SecurityErrorKind.INVALID_ISSUER,
                "The token issuer is invalid.",
            )
        except jwt.InvalidSignatureError:
            return None, self._reject(
                SecurityErrorKind.SIGNATURE_VALIDATION_FAILED,
                "The token signature is invalid.",
            )
        except jwt.DecodeError:
            return None, self._reject(
                SecurityErrorKind.MALFORMED_TOKEN,
                "The token is malformed.",
            )
        except (
            jwt.MissingRequiredClaimError,
            jwt.ImmatureSignatureError,
            jwt.InvalidIssuedAtError,
        ):
            return None, self._reject(
                SecurityErrorKind.INVALID_CLAIM,
                "The token contains an invalid claim.",
            )
        except jwt.InvalidTokenError:
            return None, self._reject(SecurityErrorKind.INVALID_TOKEN, TOKEN_INVALID)
        except Exception as e:
            audit.log_operation_error(logger, "validate_token", "", e)
            return None, TokenValidationResult.failure(
                SecurityErrorKind.UNEXPECTED_ERROR,
                VALIDATION_FAILED,
            )

        audit.log_validate_token_result(logger, True)
        return payload, TokenValidationResult.success()

    def _decode(self, token: str) -> dict[str, Any]:
        policy = self._policy
        return jwt.decode(
            token,
            policy.secret,
            algorithms=[self.ALGORITHM],
            audience=policy.audience if policy.validate_audience else None,
            issuer=policy.issuer if policy.validate_issuer else None,
            leeway=policy.clock_skew,
            options={
                "require": ["exp"],
                "verify_aud": policy.validate_audience,
            },
        )

    def _reject(
        self,
        detailed_kind: SecurityErrorKind,
        detailed_message: str,
        always: bool = False,
    ) -> TokenValidationResult:
        if always or self._detailed_errors:
            kind, message = detailed_kind, detailed_message
        else:
            # Do not reveal which check failed
            kind, message = SecurityErrorKind.INVALID_TOKEN, TOKEN_INVALID

        audit.log_validate_token_result(logger, False, message)
        return TokenValidationResult.failure(kind, message)

    @staticmethod
    def _build_payload(claims: Claims) -> dict[str, Any]:
        pairs = claims.items() if isinstance(claims, Mapping) else claims
        grouped: dict[str, list[Any]] = {}
        for name, value in pairs:
            grouped.setdefault(name, []).append(value)
        return {
            name: values[0] if len(values) == 1 else values
            for name, values in grouped.items()
        }
