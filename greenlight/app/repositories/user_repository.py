from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from greenlight.domain.entities import TokenScope, User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_for_token(
        self, scope: TokenScope, token_hash: str, now: datetime
    ) -> Optional[User]:
        """Get the owner of an unexpired token with the given scope and hash"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> Optional[User]:
        """Update a user, or return None if its version is stale"""
        pass
