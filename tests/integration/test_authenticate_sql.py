"""
Login and current-user lookup through the SQL unit of work.

Each `async with` on the unit of work ends in a rollback, which expires
every loaded row; these tests read users across such boundaries.
"""
import bcrypt
import pytest

from greenlight.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from greenlight.app.services.session_tokens import SessionTokenIssuer
from greenlight.app.use_cases.tokens import AuthenticateUseCase
from greenlight.app.use_cases.users import GetCurrentUserUseCase
from greenlight.domain.entities import User
from greenlight.domain.errors import ErrorCode


@pytest.fixture
def issuer():
    return SessionTokenIssuer(b"q" * 32, issuer="greenlight.test", audience="greenlight.test")


async def seed_user(db_session):
    async with SqlAlchemyUnitOfWork(db_session) as uow:
        user = await uow.users.create(
            User(
                name="Alice",
                email="alice@example.com",
                password_hash=bcrypt.hashpw(b"pa55word", bcrypt.gensalt(10)),
                activated=True,
            )
        )
        await uow.commit()
        return user.id


@pytest.mark.asyncio
async def test_authenticate_after_previous_unit_of_work(db_session, issuer):
    user_id = await seed_user(db_session)

    result = await AuthenticateUseCase(SqlAlchemyUnitOfWork(db_session), issuer).execute(
        "alice@example.com", "pa55word"
    )

    assert result.is_ok()
    claims = issuer.verify(result.value.authentication_token).value
    assert claims["sub"] == str(user_id)


@pytest.mark.asyncio
async def test_wrong_password_through_sql(db_session, issuer):
    await seed_user(db_session)

    result = await AuthenticateUseCase(SqlAlchemyUnitOfWork(db_session), issuer).execute(
        "alice@example.com", "wrong-password"
    )

    assert result.error.code == ErrorCode.INVALID_CREDENTIALS


@pytest.mark.asyncio
async def test_login_twice_then_load_current_user(db_session, issuer):
    user_id = await seed_user(db_session)
    authenticate = AuthenticateUseCase(SqlAlchemyUnitOfWork(db_session), issuer)

    first = await authenticate.execute("alice@example.com", "pa55word")
    second = await authenticate.execute("alice@example.com", "pa55word")
    assert first.is_ok() and second.is_ok()

    current = await GetCurrentUserUseCase(SqlAlchemyUnitOfWork(db_session), issuer).execute(
        second.value.authentication_token
    )

    assert current.is_ok()
    assert current.value.id == user_id
    assert current.value.email == "alice@example.com"
