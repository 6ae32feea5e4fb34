"""
Unit tests for GetCurrentUserUseCase
"""
import pytest

from greenlight.app.services.session_tokens import SessionTokenIssuer
from greenlight.app.use_cases.users import GetCurrentUserUseCase
from greenlight.domain.entities import User
from greenlight.domain.errors import ErrorCode


@pytest.fixture
def issuer():
    return SessionTokenIssuer(b"c" * 32, issuer="greenlight.test", audience="greenlight.test")


@pytest.mark.asyncio
async def test_token_resolves_to_user(mock_uow, issuer):
    mock_uow.users.get_by_id.return_value = User(
        id=9, name="Dave", email="dave@example.com", password_hash=b"hash", activated=True
    )
    token = issuer.sign(9).value

    result = await GetCurrentUserUseCase(mock_uow, issuer).execute(token)

    assert result.is_ok()
    assert result.value.id == 9
    mock_uow.users.get_by_id.assert_awaited_once_with(9)


@pytest.mark.asyncio
async def test_deleted_user_is_invalid_token(mock_uow, issuer):
    mock_uow.users.get_by_id.return_value = None

    result = await GetCurrentUserUseCase(mock_uow, issuer).execute(issuer.sign(9).value)

    assert result.error.code == ErrorCode.INVALID_TOKEN


@pytest.mark.asyncio
async def test_garbage_token_is_invalid_token(mock_uow, issuer):
    result = await GetCurrentUserUseCase(mock_uow, issuer).execute("not.a.jwt")

    assert result.error.code == ErrorCode.INVALID_TOKEN
    mock_uow.users.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_token_from_another_issuer_is_rejected(mock_uow, issuer):
    other = SessionTokenIssuer(b"c" * 32, issuer="someone.else", audience="greenlight.test")

    result = await GetCurrentUserUseCase(mock_uow, issuer).execute(other.sign(9).value)

    assert result.error.code == ErrorCode.INVALID_TOKEN
