"""Issuing and verifying signed identity tokens.

Tokens are HMAC-signed JWTs carrying the user id and admin flag. Verification is
stateless: there is no revocation list, a token simply stops being accepted 24
hours after it was issued.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError
from jose.utils import base64url_decode, base64url_encode

TOKEN_LIFETIME = timedelta(hours=24)


class TokenError(Exception):
    """Base class for token failures; the message is safe to show clients."""


class MissingTokenError(TokenError):
    """No credentials were presented."""

    def __init__(self, message: str = "No token provided") -> None:
        super().__init__(message)


class InvalidTokenError(TokenError):
    """Credentials were presented but cannot be trusted."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class UnexpectedSigningMethodError(InvalidTokenError):
    def __init__(self) -> None:
        super().__init__("Unexpected signing method")


class InvalidSignatureError(InvalidTokenError):
    def __init__(self) -> None:
        super().__init__("Invalid signature")


class TokenExpiredError(InvalidTokenError):
    def __init__(self) -> None:
        super().__init__("Token expired")


@dataclass(frozen=True)
class TokenClaims:
    """Decoded payload of an identity token."""

    subject_id: int
    is_admin: bool
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _is_canonical_signature(token: str) -> bool:
    """Reject signature segments whose unused trailing bits are set.

    Base64url decoding ignores the low bits of the final character, so several
    spellings decode to the same MAC. Only the one `issue` produces is accepted.
    """
    signature = token.rsplit(".", 1)[-1].encode("ascii")
    return base64url_encode(base64url_decode(signature)) == signature


class TokenService:
    """Create and validate identity tokens with a single process-wide secret."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("A signing secret is required")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def issue(self, subject_id: int, is_admin: bool) -> str:
        """Return a signed token for `subject_id` valid for 24 hours."""
        expires_at = self._clock() + TOKEN_LIFETIME
        claims: dict[str, Any] = {
            "sub": str(subject_id),
            "user_id": subject_id,
            "is_admin": is_admin,
            "exp": int(expires_at.timestamp()),
        }
        encoded: str = jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
        return encoded

    def verify(self, token: str) -> TokenClaims:
        """Validate `token` and return its claims.

        Raises:
            InvalidTokenError: If the token cannot be parsed or its claims are malformed.
            UnexpectedSigningMethodError: If the header names another algorithm.
            InvalidSignatureError: If the signature does not match the secret.
            TokenExpiredError: If the current time is at or past the expiration.
        """
        if not token:
            raise MissingTokenError()

        try:
            header = jwt.get_unverified_header(token)
        except JWTError as err:
            raise InvalidTokenError() from err
        if header.get("alg") != self._algorithm:
            raise UnexpectedSigningMethodError()

        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTClaimsError as err:
            raise InvalidTokenError() from err
        except JWTError as err:
            raise InvalidSignatureError() from err
        if not _is_canonical_signature(token):
            raise InvalidSignatureError()

        claims = self._parse_claims(payload)
        if self._clock() >= claims.expires_at:
            raise TokenExpiredError()
        return claims

    @staticmethod
    def _parse_claims(payload: dict[str, Any]) -> TokenClaims:
        subject_id = payload.get("user_id")
        is_admin = payload.get("is_admin", False)
        exp = payload.get("exp")
        if (
            not isinstance(subject_id, int)
            or isinstance(subject_id, bool)
            or not isinstance(is_admin, bool)
            or not isinstance(exp, int | float)
        ):
            raise InvalidTokenError()
        return TokenClaims(
            subject_id=subject_id,
            is_admin=is_admin,
            expires_at=datetime.fromtimestamp(exp, tz=UTC),
        )
