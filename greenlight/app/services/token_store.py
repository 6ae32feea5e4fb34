"""
Opaque Token Store

Issues scoped, single-purpose tokens and resolves them back to their owner.
Only the SHA-256 digest of a token is persisted, so a leaked tokens table
cannot be replayed.
"""

import base64
import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from greenlight.app.services.persistence import query
from greenlight.app.services.unit_of_work import UnitOfWork
from greenlight.domain.base import utcnow
from greenlight.domain.entities import Token, TokenScope, User
from greenlight.domain.errors import Error, ErrorCode
from greenlight.domain.result import Result, Return

logger = logging.getLogger(__name__)

TOKEN_ENTROPY_BYTES = 16


class IssuedToken(BaseModel):
    """A freshly issued token. `plaintext` is shown to its holder once and never stored."""

    model_config = ConfigDict(frozen=True)

    plaintext: str
    hash: str
    user_id: int
    scope: TokenScope
    expiry: datetime


def generate_plaintext(entropy_bytes: int = TOKEN_ENTROPY_BYTES) -> str:
    random_bytes = secrets.token_bytes(max(entropy_bytes, TOKEN_ENTROPY_BYTES))
    return base64.b32encode(random_bytes).decode("ascii").rstrip("=")


def hash_plaintext(plaintext: str) -> str:
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()


class TokenStore:
    """
    Persisted token lifecycle.

    Must be used inside an open unit of work; committing is left to the
    calling use case so a token is never visible without the rest of the
    transaction.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utcnow,
        timeout: Optional[float] = None,
    ):
        self.uow = uow
        self.clock = clock
        self.timeout = timeout

    async def issue(
        self, user_id: int, ttl: timedelta, scope: TokenScope
    ) -> Result[IssuedToken]:
        """
        Generate, digest and store a new token.

        Returns:
            Result with the IssuedToken (holding the plaintext), or
            PERSISTENCE_ERROR if the row could not be written
        """
        plaintext = generate_plaintext()
        token = Token(
            hash=hash_plaintext(plaintext),
            user_id=user_id,
            scope=scope,
            expiry=self.clock() + ttl,
        )

        created = await query("insert token", self.uow.tokens.create(token), self.timeout)
        if created.is_err():
            return Return.err(created.error)

        logger.info("Issued %s token for user %s", scope.value, user_id)
        return Return.ok(
            IssuedToken(
                plaintext=plaintext,
                hash=token.hash,
                user_id=user_id,
                scope=scope,
                expiry=token.expiry,
            )
        )

    async def resolve(self, scope: TokenScope, plaintext: str) -> Result[User]:
        """
        Find the user owning an unexpired token of `scope`.

        Absent, expired and wrong-scope tokens all yield the same NOT_FOUND.
        """
        found = await query(
            "find user for token",
            self.uow.users.get_for_token(scope, hash_plaintext(plaintext), self.clock()),
            self.timeout,
        )
        if found.is_err():
            return Return.err(found.error)
        if found.value is None:
            return Return.err(Error(ErrorCode.NOT_FOUND, "Invalid or expired token"))
        return Return.ok(found.value)

    async def delete_all_for_user(self, user_id: int, scope: TokenScope) -> Result[int]:
        """Invalidate every outstanding token of `scope` for the user."""
        deleted = await query(
            "delete tokens", self.uow.tokens.delete_all_for_user(user_id, scope), self.timeout
        )
        if deleted.is_err():
            return Return.err(deleted.error)
        logger.info("Deleted %s %s token(s) for user %s", deleted.value, scope.value, user_id)
        return deleted
