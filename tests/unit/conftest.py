import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from greenlight.config import ApplicationConfig
from tests.fixtures.clock import FakeClock
from tests.fixtures.in_memory import InMemoryUnitOfWork, RecordingTransport

# Keep bcrypt at its minimum work factor in tests
ApplicationConfig.BCRYPT_ROUNDS = 10


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.get_for_token = AsyncMock()
    uow.users.create = AsyncMock()
    uow.users.update = AsyncMock()

    uow.tokens = MagicMock()
    uow.tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.tokens.delete_all_for_user = AsyncMock(return_value=1)
    return uow


@pytest.fixture
def memory_uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0))
