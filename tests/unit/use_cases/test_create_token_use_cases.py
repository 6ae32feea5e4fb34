"""
Unit tests for CreatePasswordResetTokenUseCase and CreateActivationTokenUseCase
"""
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from greenlight.app.services.dispatcher import BackgroundDispatcher
from greenlight.app.services.token_store import hash_plaintext
from greenlight.app.use_cases.tokens import (
    CreateActivationTokenUseCase,
    CreatePasswordResetTokenUseCase,
)
from greenlight.domain.entities import TokenScope, User
from greenlight.domain.errors import ErrorCode


def make_user(activated: bool) -> User:
    return User(
        id=7,
        name="Alice",
        email="alice@example.com",
        password_hash=b"$2b$10$hash",
        activated=activated,
    )


@pytest.fixture
def dispatcher():
    return BackgroundDispatcher()


@pytest.mark.asyncio
async def test_password_reset_token_is_issued_and_mailed(mock_uow, dispatcher, transport, clock):
    mock_uow.users.get_by_email.return_value = make_user(activated=True)
    use_case = CreatePasswordResetTokenUseCase(mock_uow, dispatcher, transport, clock=clock)

    result = await use_case.execute("alice@example.com")
    await dispatcher.wait_idle()

    assert result.is_ok()
    assert "password reset" in result.value.message

    token = mock_uow.tokens.create.call_args.args[0]
    assert token.scope == TokenScope.password_reset
    assert token.user_id == 7
    assert token.expiry == clock.now + timedelta(hours=24)
    mock_uow.commit.assert_awaited_once()

    [(recipient, template_id, data)] = transport.sent
    assert recipient == "alice@example.com"
    assert template_id == "token_password_reset"
    assert hash_plaintext(data["passwordResetToken"]) == token.hash
    assert data["expiresIn"] == "24 hours"


@pytest.mark.asyncio
async def test_password_reset_response_does_not_contain_token(mock_uow, dispatcher, transport):
    mock_uow.users.get_by_email.return_value = make_user(activated=True)

    result = await CreatePasswordResetTokenUseCase(mock_uow, dispatcher, transport).execute(
        "alice@example.com"
    )
    await dispatcher.wait_idle()

    plaintext = transport.sent[0][2]["passwordResetToken"]
    assert plaintext not in result.value.model_dump_json()


@pytest.mark.asyncio
async def test_password_reset_unknown_email_is_not_found(mock_uow, dispatcher, transport):
    mock_uow.users.get_by_email.return_value = None

    result = await CreatePasswordResetTokenUseCase(mock_uow, dispatcher, transport).execute(
        "nobody@example.com"
    )

    assert result.error.code == ErrorCode.NOT_FOUND
    mock_uow.tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_password_reset_requires_activated_account(mock_uow, dispatcher, transport):
    mock_uow.users.get_by_email.return_value = make_user(activated=False)

    result = await CreatePasswordResetTokenUseCase(mock_uow, dispatcher, transport).execute(
        "alice@example.com"
    )

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert result.error.fields == {"email": "user account must be activated"}
    mock_uow.tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_password_reset_invalid_email(mock_uow, dispatcher, transport):
    result = await CreatePasswordResetTokenUseCase(mock_uow, dispatcher, transport).execute("")

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert result.error.fields == {"email": "must be provided"}


@pytest.mark.asyncio
async def test_storage_failure_sends_nothing(mock_uow, dispatcher, transport):
    mock_uow.users.get_by_email.return_value = make_user(activated=True)
    mock_uow.tokens.create = AsyncMock(side_effect=RuntimeError("insert failed"))

    result = await CreatePasswordResetTokenUseCase(mock_uow, dispatcher, transport).execute(
        "alice@example.com"
    )
    await dispatcher.wait_idle()

    assert result.error.code == ErrorCode.PERSISTENCE_ERROR
    assert transport.sent == []
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_mail_failure_does_not_fail_request(mock_uow, dispatcher):
    mock_uow.users.get_by_email.return_value = make_user(activated=True)
    transport = MagicMock()
    transport.send.side_effect = OSError("connection refused")

    result = await CreatePasswordResetTokenUseCase(mock_uow, dispatcher, transport).execute(
        "alice@example.com"
    )
    await dispatcher.wait_idle()

    assert result.is_ok()
    transport.send.assert_called_once()


@pytest.mark.asyncio
async def test_activation_token_is_issued_and_mailed(mock_uow, dispatcher, transport, clock):
    mock_uow.users.get_by_email.return_value = make_user(activated=False)
    use_case = CreateActivationTokenUseCase(mock_uow, dispatcher, transport, clock=clock)

    result = await use_case.execute("alice@example.com")
    await dispatcher.wait_idle()

    assert result.is_ok()
    token = mock_uow.tokens.create.call_args.args[0]
    assert token.scope == TokenScope.activation
    assert token.expiry == clock.now + timedelta(hours=72)

    [(recipient, template_id, data)] = transport.sent
    assert template_id == "token_activation"
    assert hash_plaintext(data["activationToken"]) == token.hash
    assert data["expiresIn"] == "3 days"


@pytest.mark.asyncio
async def test_activation_for_active_user_is_rejected(mock_uow, dispatcher, transport):
    mock_uow.users.get_by_email.return_value = make_user(activated=True)

    result = await CreateActivationTokenUseCase(mock_uow, dispatcher, transport).execute(
        "alice@example.com"
    )

    assert result.error.fields == {"email": "user has already been activated"}
    mock_uow.tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_activation_for_unknown_email_is_field_error(mock_uow, dispatcher, transport):
    mock_uow.users.get_by_email.return_value = None

    result = await CreateActivationTokenUseCase(mock_uow, dispatcher, transport).execute(
        "nobody@example.com"
    )

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert result.error.fields == {"email": "no matching email address found"}
