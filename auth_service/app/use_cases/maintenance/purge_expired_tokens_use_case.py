"""
Purge Expired Tokens Use Case

Deletes refresh tokens and password reset tokens past their expiry.
"""

import logging
from dataclasses import dataclass

from auth_service.libs.result import Result, Return
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.base import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurgeReport:
    refresh_tokens: int
    password_reset_tokens: int


class PurgeExpiredTokensUseCase:
    """Run periodically; lookups already ignore expired rows, this only reclaims space."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[PurgeReport]:
        now = utcnow()
        async with self.uow:
            refresh_count = await self.uow.refresh_tokens.delete_expired(now)
            reset_count = await self.uow.password_reset_tokens.delete_expired(now)
            await self.uow.commit()

        if refresh_count or reset_count:
            logger.info(
                f"Purged {refresh_count} expired refresh tokens and "
                f"{reset_count} expired password reset tokens"
            )
        return Return.ok(PurgeReport(refresh_tokens=refresh_count, password_reset_tokens=reset_count))
