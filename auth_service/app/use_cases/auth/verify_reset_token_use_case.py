from datetime import timedelta

from auth_service.libs.result import Error, Result, Return

from config import ApplicationConfig
from auth_service.app.services.credential_tokens import (
    PasswordResetTokenStore,
    is_well_formed_reset_token,
)
from auth_service.app.services.unit_of_work import UnitOfWork
from .dtos import VerifyResetTokenResponse


class VerifyResetTokenUseCase:
    """Checks that a reset token is usable without consuming it."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[VerifyResetTokenResponse]:
        if not is_well_formed_reset_token(token):
            return Return.err(Error("INVALID_TOKEN_FORMAT", "Invalid token format"))

        async with self.uow:
            reset_tokens = PasswordResetTokenStore(
                self.uow.password_reset_tokens,
                ttl=timedelta(minutes=ApplicationConfig.PASSWORD_RESET_EXPIRE_MINUTES),
            )
            record = await reset_tokens.verify(token)

        if record is None:
            return Return.err(Error("INVALID_TOKEN", "Invalid or expired reset token"))

        return Return.ok(VerifyResetTokenResponse(valid=True))
