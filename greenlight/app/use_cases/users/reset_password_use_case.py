"""
Reset Password Use Case

Redeems a password_reset token and stores a new password hash.
"""

from datetime import datetime
from typing import Callable

from greenlight.app.services.password import hash_password
from greenlight.app.services.persistence import query
from greenlight.app.services.token_store import TokenStore
from greenlight.app.services.unit_of_work import UnitOfWork
from greenlight.app.services.validator import (
    Validator,
    validate_password_plaintext,
    validate_token_plaintext,
)
from greenlight.domain.base import utcnow
from greenlight.domain.entities import TokenScope
from greenlight.domain.errors import Error, ErrorCode, validation_error
from greenlight.domain.result import Result, Return
from .dtos import PasswordResetResponse


class ResetPasswordUseCase:
    """
    Use case for confirming a password reset.

    Business Rules:
    - New password follows the same policy as registration (8..32)
    - Token must be an unexpired password_reset token
    - Every outstanding password_reset token of the user is deleted
    - Session tokens already handed out stay valid until they expire
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, token: str, password: str) -> Result[PasswordResetResponse]:
        """
        Execute reset password use case.

        Args:
            token: Password reset token (plaintext from e-mail)
            password: New plaintext password

        Returns:
            Result with PasswordResetResponse, or Error

        Errors:
            - VALIDATION_ERROR: bad password, malformed or unknown token
            - EDIT_CONFLICT: user changed concurrently
            - PERSISTENCE_ERROR / HASHING_ERROR: server faults
        """
        v = Validator()
        validate_password_plaintext(v, password)
        validate_token_plaintext(v, token)
        if not v.valid():
            return Return.err(validation_error(v.errors))

        async with self.uow:
            store = TokenStore(self.uow, clock=self.clock)

            resolved = await store.resolve(TokenScope.password_reset, token)
            if resolved.is_err():
                if resolved.error.code == ErrorCode.NOT_FOUND:
                    v.add_error("token", "invalid or expired password reset token")
                    return Return.err(validation_error(v.errors))
                return Return.err(resolved.error)
            user = resolved.value

            hashed = hash_password(password)
            if hashed.is_err():
                return Return.err(hashed.error)
            user.password_hash = hashed.value

            updated = await query("update user", self.uow.users.update(user))
            if updated.is_err():
                return Return.err(updated.error)
            if updated.value is None:
                return Return.err(
                    Error(
                        ErrorCode.EDIT_CONFLICT,
                        "Unable to update the record due to an edit conflict, please try again",
                    )
                )

            deleted = await store.delete_all_for_user(user.id, TokenScope.password_reset)
            if deleted.is_err():
                return Return.err(deleted.error)

            committed = await query("commit password reset", self.uow.commit())
            if committed.is_err():
                return Return.err(committed.error)

        return Return.ok(
            PasswordResetResponse(message="your password was successfully reset")
        )
