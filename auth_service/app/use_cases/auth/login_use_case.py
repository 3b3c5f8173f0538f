"""
Login Use Case

Handles email/password authentication and issues an access/refresh token pair.
"""

from datetime import timedelta

from auth_service.libs.result import Error, Result, Return

from config import ApplicationConfig
from auth_service.api.utils.jwt import generate_access_token
from auth_service.app.services.credential_tokens import RefreshTokenStore
from auth_service.app.services.passwords import verify_password
from auth_service.app.services.unit_of_work import UnitOfWork
from .dtos import AuthResponse, UserInfo

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid credentials")


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Unknown email, federated-only account and wrong password all return
      the same INVALID_CREDENTIALS error
    - A bcrypt comparison runs even when there is no hash to compare against
    - Every login creates a new refresh token row (multi-device)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str, password: str) -> Result[AuthResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with AuthResponse containing tokens and user, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email.strip().lower())

            password_hash = user.password_hash if user is not None else None
            if not verify_password(password, password_hash):
                return Return.err(INVALID_CREDENTIALS)

            refresh_tokens = RefreshTokenStore(
                self.uow.refresh_tokens,
                ttl=timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRE_DAYS),
            )
            refresh_token = await refresh_tokens.issue(user.id)

            await self.uow.commit()

            user_info = UserInfo.from_user(user)
            access_token = generate_access_token(user.id, user.email, user_info.role)

            return Return.ok(
                AuthResponse(
                    message="Login successful",
                    user=user_info,
                    access_token=access_token,
                    refresh_token=refresh_token,
                )
            )
