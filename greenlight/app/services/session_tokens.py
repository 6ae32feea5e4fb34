"""
Session Token Issuer

Stateless HS256 session tokens. Nothing is persisted: a token is valid
until its `exp` claim passes and cannot be revoked earlier.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

from jose import jwt
from jose.exceptions import JOSEError

from greenlight.domain.base import utcnow
from greenlight.domain.errors import Error, ErrorCode
from greenlight.domain.result import Result, Return

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
MIN_SECRET_BYTES = 32


class SessionTokenIssuer:
    def __init__(
        self,
        secret: bytes,
        issuer: str,
        audience: str,
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utcnow,
    ):
        if len(secret) < MIN_SECRET_BYTES:
            raise ValueError(f"session token secret must be at least {MIN_SECRET_BYTES} bytes")
        self._secret = secret
        self.issuer = issuer
        self.audience = audience
        self.ttl = ttl
        self.clock = clock

    @classmethod
    def from_config(cls, config) -> "SessionTokenIssuer":
        """Build the issuer once at startup; a short secret fails here, not per request."""
        return cls(
            secret=config.JWT_SECRET,
            issuer=config.JWT_ISSUER,
            audience=config.JWT_AUDIENCE,
            ttl=timedelta(hours=config.SESSION_TOKEN_TTL_HOURS),
        )

    def __repr__(self) -> str:
        return f"SessionTokenIssuer(issuer={self.issuer!r}, audience={self.audience!r})"

    def sign(self, user_id: int) -> Result[str]:
        """
        Build and sign session claims for a user.

        Args:
            user_id: Authenticated user ID, encoded as the `sub` claim

        Returns:
            Result with the compact JWT string, or INTERNAL_ERROR
        """
        now = self.clock()
        claims = {
            "sub": str(user_id),
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "nbf": now,
            "exp": now + self.ttl,
        }
        try:
            return Return.ok(jwt.encode(claims, self._secret, algorithm=ALGORITHM))
        except JOSEError as exc:
            logger.error("Signing session token failed: %s", type(exc).__name__)
            return Return.err(Error(ErrorCode.INTERNAL_ERROR, "Could not sign session token"))

    def verify(self, token: str) -> Result[dict]:
        """
        Check signature, issuer, audience and validity window.

        Returns:
            Result with the decoded claims, or INVALID_TOKEN
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
                options={"require_sub": True, "require_exp": True, "require_nbf": True},
            )
        except JOSEError:
            return Return.err(
                Error(ErrorCode.INVALID_TOKEN, "Invalid or expired authentication token")
            )
        return Return.ok(claims)

