"""
Confirm Password Reset Use Case

Handles password reset confirmation with secure token validation.
"""

import logging
from datetime import timedelta

from auth_service.libs.result import Error, Result, Return

from config import ApplicationConfig
from auth_service.app.services.credential_tokens import (
    PasswordResetTokenStore,
    RefreshTokenStore,
)
from auth_service.app.services.passwords import hash_password
from auth_service.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse

logger = logging.getLogger(__name__)

INVALID_RESET_TOKEN = Error(
    "INVALID_TOKEN",
    "Invalid or expired reset token. Please request a new password reset.",
)


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token must exist, be unused and unexpired; all failures look the same
    - Password is hashed with bcrypt
    - Token is consumed with a conditional write, so it works exactly once
    - All refresh tokens of the user are deleted
    - Everything commits in one transaction
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str, new_password: str) -> Result[MessageResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from email)
            new_password: New password to set, already validated

        Returns:
            Result with confirmation message, or Error(INVALID_TOKEN)
        """
        async with self.uow:
            reset_tokens = PasswordResetTokenStore(
                self.uow.password_reset_tokens,
                ttl=timedelta(minutes=ApplicationConfig.PASSWORD_RESET_EXPIRE_MINUTES),
            )
            record = await reset_tokens.verify(token)
            if record is None:
                return Return.err(INVALID_RESET_TOKEN)

            user = await self.uow.users.get_by_id(record.user_id)
            if user is None:
                return Return.err(INVALID_RESET_TOKEN)

            if not await reset_tokens.consume(record):
                # Lost the race against a concurrent reset with the same token
                return Return.err(INVALID_RESET_TOKEN)

            user.password_hash = hash_password(new_password)
            await self.uow.users.update(user)

            refresh_tokens = RefreshTokenStore(
                self.uow.refresh_tokens,
                ttl=timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRE_DAYS),
            )
            revoked_count = await refresh_tokens.revoke_all(user.id)

            await self.uow.commit()

            logger.info(f"Password reset for user {user.id}, {revoked_count} refresh tokens revoked")

            return Return.ok(
                MessageResponse(
                    message="Password has been reset successfully. Please log in with your new password."
                )
            )
