from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from auth_service.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_active_by_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[PasswordResetToken]:
        """Get an unused, unexpired password reset token by token hash"""
        pass

    @abstractmethod
    async def invalidate_active_by_user_id(self, user_id: UUID) -> int:
        """Mark every unused token of a user as used. Returns count."""
        pass

    @abstractmethod
    async def mark_used(self, token_id: UUID) -> bool:
        """Flip used from False to True. Returns False if it was already used."""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete tokens that expired before now. Returns count."""
        pass
