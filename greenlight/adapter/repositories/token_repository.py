from sqlalchemy import delete
from sqlmodel.ext.asyncio.session import AsyncSession

from greenlight.app.repositories.token_repository import ITokenRepository
from greenlight.domain.entities import Token, TokenScope


class TokenRepository(ITokenRepository):
    """Token repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: Token) -> Token:
        """Insert a new token row"""
        self.session.add(token)
        await self.session.flush()
        return token

    async def delete_all_for_user(self, user_id: int, scope: TokenScope) -> int:
        """Delete every token of `scope` owned by the user"""
        stmt = delete(Token).where(Token.user_id == user_id, Token.scope == scope)
        result = await self.session.execute(stmt)
        return result.rowcount
