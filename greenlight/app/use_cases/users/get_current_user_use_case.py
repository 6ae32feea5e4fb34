from greenlight.app.services.persistence import query
from greenlight.app.services.session_tokens import SessionTokenIssuer
from greenlight.app.services.unit_of_work import UnitOfWork
from greenlight.domain.errors import Error, ErrorCode
from greenlight.domain.result import Result, Return
from .dtos import UserResponse


class GetCurrentUserUseCase:
    """Resolve a bearer session token to the user named in its `sub` claim."""

    def __init__(self, uow: UnitOfWork, issuer: SessionTokenIssuer):
        self.uow = uow
        self.issuer = issuer

    async def execute(self, token: str) -> Result[UserResponse]:
        verified = self.issuer.verify(token)
        if verified.is_err():
            return Return.err(verified.error)

        try:
            user_id = int(verified.value["sub"])
        except (KeyError, TypeError, ValueError):
            return Return.err(
                Error(ErrorCode.INVALID_TOKEN, "Invalid or expired authentication token")
            )

        async with self.uow:
            found = await query("get user by id", self.uow.users.get_by_id(user_id))
            if found.is_err():
                return Return.err(found.error)
            if found.value is None:
                return Return.err(
                    Error(ErrorCode.INVALID_TOKEN, "Invalid or expired authentication token")
                )
            return Return.ok(UserResponse.from_user(found.value))
