from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from auth_service.domain.entities import RefreshToken


class IRefreshTokenRepository(ABC):
    """RefreshToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: RefreshToken) -> RefreshToken:
        """Create a new refresh token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str, user_id: UUID) -> Optional[RefreshToken]:
        """Get the refresh token of a user by token hash"""
        pass

    @abstractmethod
    async def delete_by_id(self, token_id: UUID) -> bool:
        """Delete a refresh token. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_by_token_hash(self, token_hash: str) -> bool:
        """Delete a refresh token by hash. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete every refresh token of a user. Returns count of deleted rows."""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete refresh tokens that expired before now. Returns count."""
        pass
