"""Signed, time-limited session tokens."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from todo_api.config import get_settings


class TokenVerificationError(Exception):
    """Base class for token verification failures."""


class TokenExpiredError(TokenVerificationError):
    """The token was validly signed but its lifetime has passed."""


class TokenMalformedError(TokenVerificationError):
    """The token's signature, structure or claims are invalid."""


class TokenService:
    """Issues and verifies JWTs that bind a user id.

    The server keeps no session state; a token is valid exactly when its
    signature checks out and it has not expired.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: timedelta | None = None):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in or timedelta(days=7)

    def issue(self, user_id: UUID, issued_at: datetime | None = None) -> str:
        """Create a token for ``user_id`` valid for ``expires_in`` from ``issued_at``."""
        issued_at = issued_at or datetime.now(UTC)
        claims = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> UUID:
        """Return the user id bound to ``token``.

        Raises:
            TokenExpiredError: the token is past its validity window.
            TokenMalformedError: the signature, structure or claims are invalid.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JWTError as e:
            raise TokenMalformedError("Token is invalid") from e

        try:
            return UUID(payload["sub"])
        except (KeyError, TypeError, ValueError) as e:
            raise TokenMalformedError("Token subject is not a user id") from e


@lru_cache
def get_token_service() -> TokenService:
    """Get the token service configured from settings."""
    settings = get_settings()
    return TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=timedelta(minutes=settings.jwt_expiration_minutes),
    )
