"""
Refresh Token Use Case

Mints a new access token from a persisted refresh token.
"""

from datetime import timedelta
from typing import Optional

from auth_service.libs.result import Error, Result, Return

from config import ApplicationConfig
from auth_service.api.utils.jwt import generate_access_token
from auth_service.app.services.credential_tokens import RefreshTokenStore
from auth_service.app.services.unit_of_work import UnitOfWork
from .dtos import RefreshTokenResponse, UserInfo


class RefreshTokenUseCase:
    """
    Use case for refreshing JWT access tokens.

    Business Rules:
    - JWT signature, expiry and type are checked before any lookup
    - A stored, unexpired row for the same user must exist
    - Expired rows are deleted when encountered
    - The user must still exist
    - The refresh token is not rotated
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, refresh_token: Optional[str]) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token presented by the client

        Returns:
            Result with RefreshTokenResponse containing a new access token, or Error
        """
        if not refresh_token:
            return Return.err(Error("REFRESH_TOKEN_REQUIRED", "Refresh token required"))

        async with self.uow:
            refresh_tokens = RefreshTokenStore(
                self.uow.refresh_tokens,
                ttl=timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRE_DAYS),
            )
            record = await refresh_tokens.find_active(refresh_token)

            if record is None:
                # Persist the cleanup of an expired row, if there was one
                await self.uow.commit()
                return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

            user = await self.uow.users.get_by_id(record.user_id)
            if user is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

            access_token = generate_access_token(
                user.id, user.email, UserInfo.from_user(user).role
            )

            return Return.ok(RefreshTokenResponse(access_token=access_token))
