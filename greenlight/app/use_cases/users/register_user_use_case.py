"""
Register User Use Case

Creates a deactivated account and e-mails its first activation token.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

from greenlight.app.services.dispatcher import BackgroundDispatcher
from greenlight.app.services.notifications import (
    INotificationTransport,
    describe_ttl,
    notification_task,
)
from greenlight.app.services.password import hash_password
from greenlight.app.services.persistence import query
from greenlight.app.services.token_store import TokenStore
from greenlight.app.services.unit_of_work import UnitOfWork
from greenlight.app.services.validator import Validator, validate_user
from greenlight.config import ApplicationConfig
from greenlight.domain.base import utcnow
from greenlight.domain.entities import TokenScope, User
from greenlight.domain.errors import ErrorCode, validation_error
from greenlight.domain.result import Result, Return
from .dtos import RegisterUserCommand, UserResponse


class RegisterUserUseCase:
    """
    Register User Use Case

    Business Logic:
    1. Validate name, email and plaintext password
    2. Reject an email that is already registered
    3. Hash the password (bcrypt); only the hash reaches the User
    4. Insert the user, deactivated
    5. Issue an activation token and commit
    6. Send the welcome e-mail in the background
    """

    def __init__(
        self,
        uow: UnitOfWork,
        dispatcher: BackgroundDispatcher,
        transport: INotificationTransport,
        ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.dispatcher = dispatcher
        self.transport = transport
        self.ttl = ttl or timedelta(hours=ApplicationConfig.ACTIVATION_TOKEN_TTL_HOURS)
        self.clock = clock

    async def execute(self, command: RegisterUserCommand) -> Result[UserResponse]:
        v = Validator()
        validate_user(v, command.name, command.email, command.password)
        if not v.valid():
            return Return.err(validation_error(v.errors))

        async with self.uow:
            existing = await query("get user by email", self.uow.users.get_by_email(command.email))
            if existing.is_err():
                return Return.err(existing.error)
            if existing.value is not None:
                v.add_error("email", "a user with this email address already exists")
                return Return.err(validation_error(v.errors))

            hashed = hash_password(command.password)
            if hashed.is_err():
                return Return.err(hashed.error)

            user = User(
                name=command.name,
                email=command.email,
                password_hash=hashed.value,
                activated=False,
            )
            created = await query("insert user", self.uow.users.create(user))
            if created.is_err():
                if created.error.code == ErrorCode.DUPLICATE_EMAIL:
                    v.add_error("email", "a user with this email address already exists")
                    return Return.err(validation_error(v.errors))
                return Return.err(created.error)
            user = created.value

            issued = await TokenStore(self.uow, clock=self.clock).issue(
                user.id, self.ttl, TokenScope.activation
            )
            if issued.is_err():
                return Return.err(issued.error)

            committed = await query("commit new user", self.uow.commit())
            if committed.is_err():
                return Return.err(committed.error)

            response = UserResponse.from_user(user)

        self.dispatcher.dispatch(
            notification_task(
                self.transport,
                response.email,
                "user_welcome",
                {
                    "userID": response.id,
                    "activationToken": issued.value.plaintext,
                    "expiresIn": describe_ttl(self.ttl),
                },
            )
        )

        return Return.ok(response)
