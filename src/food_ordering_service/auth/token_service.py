"""Signed bearer tokens for authenticated users.

Tokens are HMAC-signed JWTs carrying the user id (sub), email, issuer,
audience and expiry. Expiry is enforced exactly: a token is valid only while
the current time is strictly before its exp claim.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from food_ordering_service.models.user_models import User
from food_ordering_service.services.errors import InvalidRequestError

logger = logging.getLogger(__name__)

DEFAULT_ISSUER = "myapp"
DEFAULT_AUDIENCE = "myclient"
DEFAULT_LIFETIME = timedelta(hours=24)


@dataclass(frozen=True)
class TokenSettings:
    """Deployment configuration for token signing.

    Attributes:
        secret: Symmetric signing key
        issuer: Value of the iss claim
        audience: Value of the aud claim
        algorithm: JWS algorithm
        lifetime: Time between issuance and expiry
    """

    secret: str
    issuer: str = DEFAULT_ISSUER
    audience: str = DEFAULT_AUDIENCE
    algorithm: str = "HS256"
    lifetime: timedelta = DEFAULT_LIFETIME

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("Token signing secret must be provided")
        if self.lifetime <= timedelta(0):
            raise ValueError("Token lifetime must be positive")

    @classmethod
    def from_env(cls) -> "TokenSettings":
        """Build settings from JWT_* environment variables.

        Returns:
            TokenSettings read from the environment

        Raises:
            ValueError: If JWT_SECRET is not set
        """
        lifetime_minutes = int(os.getenv("JWT_LIFETIME_MINUTES", "1440"))
        return cls(
            secret=os.getenv("JWT_SECRET", ""),
            issuer=os.getenv("JWT_ISSUER", DEFAULT_ISSUER),
            audience=os.getenv("JWT_AUDIENCE", DEFAULT_AUDIENCE),
            lifetime=timedelta(minutes=lifetime_minutes),
        )


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims recovered from a validated token."""

    user_id: int
    email: str
    expires_at: datetime


class TokenService:
    """Issues and validates signed bearer tokens."""

    def __init__(
        self,
        settings: TokenSettings,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the token service.

        Args:
            settings: Signing configuration, fixed for the process lifetime
            clock: Returns the current UTC time (defaults to the system clock)
        """
        self.settings = settings
        self._clock = clock or (lambda: datetime.now(UTC))

    def issue_token(self, user: User) -> str:
        """Create a signed token for a user.

        Args:
            user: The authenticated user

        Returns:
            str: Encoded JWT
        """
        issued_at = int(self._clock().timestamp())
        expires_at = issued_at + int(self.settings.lifetime.total_seconds())

        payload: dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "iss": self.settings.issuer,
            "aud": self.settings.audience,
            "iat": issued_at,
            "exp": expires_at,
        }
        token: str = jwt.encode(payload, self.settings.secret, algorithm=self.settings.algorithm)
        return token

    def validate_token(self, token: str) -> TokenClaims | None:
        """Validate a token and extract its claims.

        Signature, issuer and audience are checked by the JWT library; the
        expiry check is done here against the injected clock with no leeway.

        Args:
            token: Encoded JWT presented by the client

        Returns:
            TokenClaims if the token is valid, None otherwise

        Raises:
            InvalidRequestError: If a correctly signed token has a missing or
                non-numeric subject
        """
        try:
            data = jwt.decode(
                token,
                self.settings.secret,
                algorithms=[self.settings.algorithm],
                audience=self.settings.audience,
                issuer=self.settings.issuer,
                options={"verify_exp": False, "require_exp": True},
            )
        except JWTError as e:
            logger.info(f"Rejected bearer token: {e}")
            return None

        exp = data.get("exp")
        if not isinstance(exp, int) or isinstance(exp, bool):
            logger.info("Rejected bearer token: non-integer exp claim")
            return None

        if self._clock().timestamp() >= exp:
            logger.info("Rejected bearer token: expired")
            return None

        email = data.get("email")
        if not isinstance(email, str) or not email:
            logger.info("Rejected bearer token: missing email claim")
            return None

        try:
            user_id = int(data.get("sub", ""))
        except (TypeError, ValueError):
            logger.info("Rejected bearer token: non-numeric subject")
            raise InvalidRequestError("Token subject is not a user id") from None

        return TokenClaims(
            user_id=user_id,
            email=email,
            expires_at=datetime.fromtimestamp(exp, UTC),
        )
