"""
Create Activation Token Use Case

Re-sends an activation token to a registered but inactive account.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

from greenlight.app.services.dispatcher import BackgroundDispatcher
from greenlight.app.services.notifications import (
    INotificationTransport,
    describe_ttl,
    notification_task,
)
from greenlight.app.services.persistence import query
from greenlight.app.services.token_store import TokenStore
from greenlight.app.services.unit_of_work import UnitOfWork
from greenlight.app.services.validator import Validator, validate_email
from greenlight.config import ApplicationConfig
from greenlight.domain.base import utcnow
from greenlight.domain.entities import TokenScope
from greenlight.domain.errors import validation_error
from greenlight.domain.result import Result, Return
from .dtos import TokenRequestResponse


class CreateActivationTokenUseCase:
    """
    Use case for requesting a new activation e-mail.

    Business Rules:
    - Unknown email and already-active accounts are reported against the
      `email` field
    - Earlier activation tokens stay valid until they expire or the
      account is activated
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

    async def execute(self, email: str) -> Result[TokenRequestResponse]:
        v = Validator()
        validate_email(v, email)
        if not v.valid():
            return Return.err(validation_error(v.errors))

        async with self.uow:
            found = await query("get user by email", self.uow.users.get_by_email(email))
            if found.is_err():
                return Return.err(found.error)
            user = found.value

            if user is None:
                v.add_error("email", "no matching email address found")
                return Return.err(validation_error(v.errors))

            if user.activated:
                v.add_error("email", "user has already been activated")
                return Return.err(validation_error(v.errors))

            issued = await TokenStore(self.uow, clock=self.clock).issue(
                user.id, self.ttl, TokenScope.activation
            )
            if issued.is_err():
                return Return.err(issued.error)

            committed = await query("commit activation token", self.uow.commit())
            if committed.is_err():
                return Return.err(committed.error)

            recipient = user.email

        self.dispatcher.dispatch(
            notification_task(
                self.transport,
                recipient,
                "token_activation",
                {
                    "activationToken": issued.value.plaintext,
                    "expiresIn": describe_ttl(self.ttl),
                },
            )
        )

        return Return.ok(
            TokenRequestResponse(
                message="an email will be sent to you containing activation instructions"
            )
        )
