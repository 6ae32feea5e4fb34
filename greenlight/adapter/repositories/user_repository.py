from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from greenlight.app.repositories.user_repository import IUserRepository
from greenlight.domain.entities import Token, TokenScope, User
from greenlight.domain.errors import DuplicateEmailError


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_for_token(
        self, scope: TokenScope, token_hash: str, now: datetime
    ) -> Optional[User]:
        """Join tokens to users on hash and scope, ignoring expired rows"""
        stmt = (
            select(User)
            .join(Token, Token.user_id == User.id)
            .where(
                Token.hash == token_hash,
                Token.scope == scope,
                Token.expiry > now,
            )
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def create(self, user: User) -> User:
        """Create a new user"""
        if not user.password_hash:
            raise ValueError("missing password hash for user")
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateEmailError(user.email) from exc
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> Optional[User]:
        """Write the user back only if nobody bumped its version meanwhile"""
        if not user.password_hash:
            raise ValueError("missing password hash for user")
        stmt = (
            update(User)
            .where(User.id == user.id, User.version == user.version)
            .values(
                name=user.name,
                email=user.email,
                password_hash=user.password_hash,
                activated=user.activated,
                version=User.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise DuplicateEmailError(user.email) from exc
        if result.rowcount == 0:
            return None
        await self.session.refresh(user)
        return user
