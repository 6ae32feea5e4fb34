from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from greenlight.adapter.services.mailer import SmtpMailer
from greenlight.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from greenlight.api.error import raise_for_error
from greenlight.app.services.dispatcher import BackgroundDispatcher
from greenlight.app.services.notifications import INotificationTransport
from greenlight.app.services.session_tokens import SessionTokenIssuer
from greenlight.app.use_cases.users import GetCurrentUserUseCase, UserResponse
from greenlight.config import ApplicationConfig

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()

_mailer = SmtpMailer.from_config(ApplicationConfig)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_dispatcher(request: Request) -> BackgroundDispatcher:
    return request.app.state.dispatcher


def get_mailer() -> INotificationTransport:
    return _mailer


def get_token_issuer(request: Request) -> SessionTokenIssuer:
    return request.app.state.token_issuer


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    uow=Depends(get_unit_of_work),
    issuer: SessionTokenIssuer = Depends(get_token_issuer),
) -> UserResponse:
    """
    Dependency to extract and verify the session token from the Authorization header.

    Raises:
        ClientError: 401 if the token is invalid, expired or names an unknown user
    """
    result = await GetCurrentUserUseCase(uow, issuer).execute(credentials.credentials)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
