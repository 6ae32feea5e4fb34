from abc import ABC, abstractmethod

from greenlight.domain.entities import Token, TokenScope


class ITokenRepository(ABC):
    """Token repository interface - application layer"""

    @abstractmethod
    async def create(self, token: Token) -> Token:
        """Insert a new token row"""
        pass

    @abstractmethod
    async def delete_all_for_user(self, user_id: int, scope: TokenScope) -> int:
        """Delete every token of `scope` owned by the user, returning the count"""
        pass
