"""
Activate User Use Case

Redeems an activation token.
"""

from datetime import datetime
from typing import Callable

from greenlight.app.services.persistence import query
from greenlight.app.services.token_store import TokenStore
from greenlight.app.services.unit_of_work import UnitOfWork
from greenlight.app.services.validator import Validator, validate_token_plaintext
from greenlight.domain.base import utcnow
from greenlight.domain.entities import TokenScope
from greenlight.domain.errors import Error, ErrorCode, validation_error
from greenlight.domain.result import Result, Return
from .dtos import UserResponse


class ActivateUserUseCase:
    """
    Use case for account activation.

    Business Rules:
    - Token must be an unexpired activation token
    - An unknown or expired token is reported against the `token` field
    - Concurrent edits of the user fail with EDIT_CONFLICT
    - Every outstanding activation token of the user is deleted
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, token: str) -> Result[UserResponse]:
        v = Validator()
        validate_token_plaintext(v, token)
        if not v.valid():
            return Return.err(validation_error(v.errors))

        async with self.uow:
            store = TokenStore(self.uow, clock=self.clock)

            resolved = await store.resolve(TokenScope.activation, token)
            if resolved.is_err():
                if resolved.error.code == ErrorCode.NOT_FOUND:
                    v.add_error("token", "invalid or expired activation token")
                    return Return.err(validation_error(v.errors))
                return Return.err(resolved.error)
            user = resolved.value

            user.activated = True
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

            deleted = await store.delete_all_for_user(user.id, TokenScope.activation)
            if deleted.is_err():
                return Return.err(deleted.error)

            committed = await query("commit activation", self.uow.commit())
            if committed.is_err():
                return Return.err(committed.error)

            return Return.ok(UserResponse.from_user(updated.value))
