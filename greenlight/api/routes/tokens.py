from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from greenlight.api.error import raise_for_error
from greenlight.app.services.dispatcher import BackgroundDispatcher
from greenlight.app.services.notifications import INotificationTransport
from greenlight.app.services.session_tokens import SessionTokenIssuer
from greenlight.app.services.unit_of_work import UnitOfWork
from greenlight.app.use_cases.tokens import (
    AuthenticateUseCase,
    AuthenticationResponse,
    CreateActivationTokenUseCase,
    CreatePasswordResetTokenUseCase,
    TokenRequestResponse,
)
from greenlight.depends import get_dispatcher, get_mailer, get_token_issuer, get_unit_of_work

router = APIRouter(prefix="/tokens")


class AuthenticationRequest(BaseModel):
    """
    Login HTTP request payload

    Shape rules (email format, password length) are enforced by the use case
    so that failures come back as field errors.
    """

    email: str = Field("", description="User email address")
    password: str = Field("", description="User password")


@router.post(
    "/authentication",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthenticationResponse,
)
async def create_authentication_token(
    request: AuthenticationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionTokenIssuer = Depends(get_token_issuer),
):
    """
    Exchange email and password for a signed session token.

    Raises:
        - 401 Unauthorized: Invalid credentials (unknown email or wrong password)
        - 422 Unprocessable Entity: Invalid email or password shape
        - 500 Internal Server Error: Server error
    """
    use_case = AuthenticateUseCase(uow, issuer)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class EmailRequest(BaseModel):
    """Request payload carrying only an email address"""

    email: str = Field("", description="User email address")


@router.post(
    "/password-reset",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=TokenRequestResponse,
)
async def create_password_reset_token(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: BackgroundDispatcher = Depends(get_dispatcher),
    mailer: INotificationTransport = Depends(get_mailer),
):
    """
    Issue a password reset token and e-mail it.

    The token is never part of the response.

    Raises:
        - 404 Not Found: No account for this email
        - 422 Unprocessable Entity: Invalid email or account not activated
        - 500 Internal Server Error: Server error
    """
    use_case = CreatePasswordResetTokenUseCase(uow, dispatcher, mailer)
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/activation",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=TokenRequestResponse,
)
async def create_activation_token(
    request: EmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: BackgroundDispatcher = Depends(get_dispatcher),
    mailer: INotificationTransport = Depends(get_mailer),
):
    """
    Issue a fresh activation token and e-mail it.

    Raises:
        - 422 Unprocessable Entity: Invalid or unknown email, or already activated
        - 500 Internal Server Error: Server error
    """
    use_case = CreateActivationTokenUseCase(uow, dispatcher, mailer)
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
