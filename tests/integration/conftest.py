import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from greenlight.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from greenlight.api.app import create_app
from greenlight.config import ApplicationConfig
from greenlight.depends import get_mailer, get_unit_of_work
from tests.fixtures.in_memory import RecordingTransport

# Keep bcrypt at its minimum work factor in tests
ApplicationConfig.BCRYPT_ROUNDS = 10


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def mailbox():
    return RecordingTransport()


@pytest.fixture
def app(db_session, mailbox):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_mailer] = lambda: mailbox
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await app.state.dispatcher.shutdown()


@pytest.fixture
def last_mail(app, mailbox):
    """Wait for background e-mail and return the newest (recipient, template, data)."""

    async def _last_mail():
        await app.state.dispatcher.wait_idle()
        return mailbox.sent[-1]

    return _last_mail


@pytest.fixture
def register(client, last_mail):
    """Register a user through the API and return (user json, activation token)."""

    async def _register(email="alice@example.com", password="pa55word", name="Alice Smith"):
        response = await client.post(
            "/v1/users", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201
        _, _, data = await last_mail()
        return response.json(), data["activationToken"]

    return _register


@pytest.fixture
def activated_user(client, register):
    """Register and activate a user; returns the user json."""

    async def _activated_user(email="alice@example.com", password="pa55word"):
        _, token = await register(email=email, password=password)
        response = await client.put("/v1/users/activated", json={"token": token})
        assert response.status_code == 200
        return response.json()

    return _activated_user
