from datetime import timedelta
from typing import Optional

from auth_service.libs.result import Result, Return

from config import ApplicationConfig
from auth_service.app.services.credential_tokens import RefreshTokenStore
from auth_service.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse


class LogoutUseCase:
    """
    Deletes the presented refresh token.

    A missing token, or one that is not stored, still logs out successfully.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, refresh_token: Optional[str]) -> Result[MessageResponse]:
        if refresh_token:
            async with self.uow:
                refresh_tokens = RefreshTokenStore(
                    self.uow.refresh_tokens,
                    ttl=timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRE_DAYS),
                )
                await refresh_tokens.revoke(refresh_token)
                await self.uow.commit()

        return Return.ok(MessageResponse(message="Logout successful"))
