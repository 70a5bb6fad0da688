"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. A token
carries the account id (sub), issued-at (iat) and expiry (exp), signed
with HS256 using a process-wide secret. There is no server-side
revocation: a token is valid for whoever holds it until exp passes.

The secret is held by an explicitly constructed TokenService instead of
an ambient settings singleton, so tests can build services with any
secret they like via from_secret() without touching the environment.
"""

import time
from dataclasses import dataclass
from typing import Optional

import jwt
from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings

ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 3600


class TokenError(Exception):
    """Base class for token creation/verification failures."""


class EncodeError(TokenError):
    """Signing a claim failed. Surfaced as an internal error."""


class DecodeError(TokenError):
    """Bad signature, wrong secret, malformed, or expired token."""


class MissingSecretError(TokenError):
    """MEMO_JWT_SECRET is absent or empty. Fatal at startup."""


class InvalidExpirationError(TokenError):
    """MEMO_JWT_EXP_SECS is present but not a non-negative integer."""


@dataclass(frozen=True)
class IdentityClaim:
    """The verified identity carried by a token. Never persisted."""

    sub: int  # account id
    iat: int  # issued at, epoch seconds
    exp: int  # expiry, epoch seconds


class TokenSettings(BaseSettings):
    """Token config read once at startup (MEMO_JWT_* env vars)."""

    jwt_secret: Optional[SecretStr] = None
    jwt_exp_secs: int = Field(default=DEFAULT_TTL_SECONDS, ge=0)

    model_config = {"env_prefix": "MEMO_"}


class TokenService:
    """Signs and verifies time-bounded identity tokens.

    Learn: Holds only immutable configuration (secret bytes + TTL), so a
    single instance is shared across concurrent requests without locks.
    The secret has no public accessor and never shows up in repr().
    """

    def __init__(self, secret: bytes, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self._secret = secret
        self._ttl_seconds = ttl_seconds

    @classmethod
    def from_secret(
        cls, secret: bytes, ttl_seconds: int = DEFAULT_TTL_SECONDS
    ) -> "TokenService":
        return cls(secret, ttl_seconds)

    @classmethod
    def from_environment(cls) -> "TokenService":
        """Build from MEMO_JWT_SECRET / MEMO_JWT_EXP_SECS.

        Raises MissingSecretError or InvalidExpirationError. Both are
        meant to stop the process from starting, not to be handled.
        """
        try:
            config = TokenSettings()
        except ValidationError as e:
            raise InvalidExpirationError(
                "MEMO_JWT_EXP_SECS must be a non-negative integer"
            ) from e

        if config.jwt_secret is None or not config.jwt_secret.get_secret_value():
            raise MissingSecretError("MEMO_JWT_SECRET must be set")

        return cls(
            config.jwt_secret.get_secret_value().encode("utf-8"),
            config.jwt_exp_secs,
        )

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def __repr__(self) -> str:
        return f"TokenService(ttl_seconds={self._ttl_seconds})"

    def generate(self, subject_id: int) -> str:
        """Mint a token for subject_id, valid for ttl_seconds from now."""
        now = int(time.time())
        payload = {
            # RFC 7519 wants sub as a string; PyJWT enforces it on decode.
            "sub": str(subject_id),
            "iat": now,
            "exp": now + self._ttl_seconds,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise EncodeError("token encoding failed") from e

    def verify(self, token: str) -> IdentityClaim:
        """Verify signature and expiry, and return the claim.

        Learn: Expiry is checked twice. PyJWT validates exp, and then we
        compare exp to the local clock ourselves, so a library upgrade
        that changes (or disables) its exp handling cannot let expired
        tokens through. Both treat a token as dead from the second exp
        is reached, with no clock-skew leeway.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.InvalidTokenError as e:
            raise DecodeError(f"Invalid token: {e}") from e

        try:
            claim = IdentityClaim(
                sub=int(payload["sub"]),
                iat=int(payload["iat"]),
                exp=int(payload["exp"]),
            )
        except (TypeError, ValueError) as e:
            raise DecodeError("Invalid token: malformed claims") from e

        if claim.exp <= int(time.time()):
            raise DecodeError("Token has expired")
        return claim
