"""Signing and verification of bearer identity tokens."""
import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt

from core.config import Settings

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """Raised when a token is malformed, badly signed, expired, or has no usable subject."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenCodec:
    """
    Issue and verify HMAC-signed JWTs that carry a user id in the ``sub`` claim.

    The secret is fixed at construction. When ``expires_in`` is None (the
    default) issued tokens carry no ``exp`` claim and stay valid until the
    secret changes.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta | None = None,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        """Build a codec from application settings."""
        expires_in = (
            timedelta(seconds=settings.token_expire_seconds)
            if settings.token_expire_seconds is not None
            else None
        )
        return cls(settings.jwt_secret, settings.jwt_algorithm, expires_in)

    def issue(self, subject: UUID) -> str:
        """Return a signed token binding ``subject``."""
        payload: dict = {"sub": str(subject)}
        if self._expires_in is not None:
            now = datetime.now(UTC)
            payload["iat"] = now
            payload["exp"] = now + self._expires_in
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> UUID:
        """
        Verify ``token`` and return the subject it was issued for.

        Raises:
            InvalidTokenError: If the signature does not match, the token is
                malformed or expired, or the subject is missing or not a UUID.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.PyJWTError as e:
            logger.warning("token_verify_failed error=%s", e)
            raise InvalidTokenError from e

        try:
            return UUID(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token: malformed sub claim") from e
