"""
Token store against the real SQL repositories.

A settable clock drives expiry instead of waiting.
"""
from datetime import datetime, timedelta

import bcrypt
import pytest
from sqlmodel import select

from greenlight.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from greenlight.app.services.token_store import TokenStore, hash_plaintext
from greenlight.domain.entities import Token, TokenScope, User
from greenlight.domain.errors import ErrorCode
from tests.fixtures.clock import FakeClock


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0))


async def create_user(uow, email="alice@example.com"):
    user = User(
        name="Alice",
        email=email,
        password_hash=bcrypt.hashpw(b"pa55word", bcrypt.gensalt(10)),
        activated=True,
    )
    user = await uow.users.create(user)
    await uow.commit()
    return user


@pytest.mark.asyncio
async def test_issue_resolve_and_expire(db_session, clock):
    async with SqlAlchemyUnitOfWork(db_session) as uow:
        user = await create_user(uow)
        store = TokenStore(uow, clock=clock)

        issued = await store.issue(user.id, timedelta(hours=24), TokenScope.password_reset)
        await uow.commit()
        plaintext = issued.value.plaintext

        # Only the digest is stored
        rows = (await db_session.exec(select(Token))).all()
        assert [row.hash for row in rows] == [hash_plaintext(plaintext)]
        assert plaintext not in [row.hash for row in rows]

        # Wrong scope never matches
        wrong_scope = await store.resolve(TokenScope.activation, plaintext)
        assert wrong_scope.error.code == ErrorCode.NOT_FOUND

        resolved = await store.resolve(TokenScope.password_reset, plaintext)
        assert resolved.is_ok()
        assert resolved.value.id == user.id

        clock.advance(timedelta(hours=25))
        expired = await store.resolve(TokenScope.password_reset, plaintext)
        assert expired.error.code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_delete_all_for_user_is_scoped(db_session, clock):
    async with SqlAlchemyUnitOfWork(db_session) as uow:
        alice = await create_user(uow, "alice@example.com")
        bob = await create_user(uow, "bob@example.com")
        store = TokenStore(uow, clock=clock)

        await store.issue(alice.id, timedelta(hours=1), TokenScope.password_reset)
        await store.issue(alice.id, timedelta(hours=1), TokenScope.password_reset)
        activation = await store.issue(alice.id, timedelta(hours=1), TokenScope.activation)
        bobs = await store.issue(bob.id, timedelta(hours=1), TokenScope.password_reset)
        await uow.commit()

        deleted = await store.delete_all_for_user(alice.id, TokenScope.password_reset)
        await uow.commit()

        assert deleted.value == 2
        assert (await store.resolve(TokenScope.activation, activation.value.plaintext)).is_ok()
        assert (await store.resolve(TokenScope.password_reset, bobs.value.plaintext)).is_ok()


@pytest.mark.asyncio
async def test_stale_version_update_is_rejected(db_session):
    async with SqlAlchemyUnitOfWork(db_session) as uow:
        user = await create_user(uow)

        user.activated = False
        updated = await uow.users.update(user)
        await uow.commit()
        assert updated.version == 2

        user.version = 1
        assert await uow.users.update(user) is None


@pytest.mark.asyncio
async def test_user_without_hash_is_never_written(db_session):
    async with SqlAlchemyUnitOfWork(db_session) as uow:
        with pytest.raises(ValueError):
            await uow.users.create(User(name="Nohash", email="nohash@example.com"))
