from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from greenlight.api.error import raise_for_error
from greenlight.app.services.dispatcher import BackgroundDispatcher
from greenlight.app.services.notifications import INotificationTransport
from greenlight.app.services.unit_of_work import UnitOfWork
from greenlight.app.use_cases.users import (
    ActivateUserUseCase,
    PasswordResetResponse,
    RegisterUserCommand,
    RegisterUserUseCase,
    ResetPasswordUseCase,
    UserResponse,
)
from greenlight.depends import get_current_user, get_dispatcher, get_mailer, get_unit_of_work

router = APIRouter(prefix="/users")


class RegisterUserRequest(BaseModel):
    """Registration HTTP request payload"""

    name: str = Field("", description="Display name")
    email: str = Field("", description="User email address")
    password: str = Field("", description="Password (8 to 32 characters)")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
async def register_user(
    request: RegisterUserRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: BackgroundDispatcher = Depends(get_dispatcher),
    mailer: INotificationTransport = Depends(get_mailer),
):
    """
    Register a new, deactivated user and e-mail an activation token.

    Raises:
        - 422 Unprocessable Entity: Invalid fields or email already registered
        - 500 Internal Server Error: Server error
    """
    command = RegisterUserCommand(
        name=request.name, email=request.email, password=request.password
    )

    use_case = RegisterUserUseCase(uow, dispatcher, mailer)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ActivateUserRequest(BaseModel):
    token: str = Field("", description="Activation token from e-mail")


@router.put("/activated", status_code=status.HTTP_200_OK, response_model=UserResponse)
async def activate_user(
    request: ActivateUserRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Activate the account owning an activation token.

    Raises:
        - 409 Conflict: User edited concurrently
        - 422 Unprocessable Entity: Malformed, unknown or expired token
        - 500 Internal Server Error: Server error
    """
    use_case = ActivateUserUseCase(uow)
    result = await use_case.execute(request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResetPasswordRequest(BaseModel):
    password: str = Field("", description="New password (8 to 32 characters)")
    token: str = Field("", description="Password reset token from e-mail")


@router.put(
    "/password", status_code=status.HTTP_200_OK, response_model=PasswordResetResponse
)
async def reset_password(
    request: ResetPasswordRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Set a new password using a password reset token.

    Raises:
        - 409 Conflict: User edited concurrently
        - 422 Unprocessable Entity: Invalid password, or malformed / unknown / expired token
        - 500 Internal Server Error: Server error
    """
    use_case = ResetPasswordUseCase(uow)
    result = await use_case.execute(request.token, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserResponse)
async def me(current_user: UserResponse = Depends(get_current_user)):
    """Return the user named by the bearer session token."""
    return current_user
