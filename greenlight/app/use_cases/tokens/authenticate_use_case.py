"""
Authenticate Use Case

Exchanges an email and password for a signed, stateless session token.
"""

import logging

from greenlight.app.services.password import burn_password_check, password_matches
from greenlight.app.services.persistence import query
from greenlight.app.services.session_tokens import SessionTokenIssuer
from greenlight.app.services.unit_of_work import UnitOfWork
from greenlight.app.services.validator import (
    Validator,
    validate_email,
    validate_password_plaintext,
)
from greenlight.domain.errors import Error, ErrorCode, validation_error
from greenlight.domain.result import Result, Return
from .dtos import AuthenticationResponse

logger = logging.getLogger(__name__)


def invalid_credentials() -> Error:
    return Error(ErrorCode.INVALID_CREDENTIALS, "Invalid authentication credentials")


class AuthenticateUseCase:
    """
    Use case for login.

    Business Rules:
    - Email and password are shape-checked before any lookup
    - Unknown email and wrong password fail identically (no enumeration),
      and an unknown email still pays for one bcrypt check
    - A corrupt stored hash is a server fault, never a credential failure
    - The token is signed, not stored: it stays valid until it expires
    """

    def __init__(self, uow: UnitOfWork, issuer: SessionTokenIssuer):
        self.uow = uow
        self.issuer = issuer

    async def execute(self, email: str, password: str) -> Result[AuthenticationResponse]:
        """
        Execute authenticate use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with AuthenticationResponse, or VALIDATION_ERROR,
            INVALID_CREDENTIALS, PERSISTENCE_ERROR or INTERNAL_ERROR
        """
        v = Validator()
        validate_email(v, email)
        validate_password_plaintext(v, password)
        if not v.valid():
            return Return.err(validation_error(v.errors))

        async with self.uow:
            found = await query("get user by email", self.uow.users.get_by_email(email))
            if found.is_err():
                return Return.err(found.error)
            user = found.value

            if user is None:
                burn_password_check(password)
                return Return.err(invalid_credentials())

            match = password_matches(user.password_hash, password)
            if match.is_err():
                logger.error(
                    "Credential check failed for user %s: %s", user.id, match.error.message
                )
                return Return.err(
                    Error(ErrorCode.INTERNAL_ERROR, "Could not verify credentials")
                )
            if not match.value:
                return Return.err(invalid_credentials())

            signed = self.issuer.sign(user.id)
            if signed.is_err():
                return Return.err(signed.error)

            logger.info("User %s authenticated", user.id)

        return Return.ok(AuthenticationResponse(authentication_token=signed.value))
