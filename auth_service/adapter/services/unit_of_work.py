from sqlmodel.ext.asyncio.session import AsyncSession

from auth_service.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from auth_service.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from auth_service.adapter.repositories.user_repository import UserRepository
from auth_service.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.refresh_tokens = RefreshTokenRepository(self.session)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
