"""
Federated Login Use Case

Signs in a user whose identity was verified by an external provider (Google).
"""

import logging
from datetime import timedelta

from auth_service.libs.result import Error, Result, Return

from config import ApplicationConfig
from auth_service.api.utils.jwt import generate_access_token
from auth_service.app.services.credential_tokens import RefreshTokenStore
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.entities import User, UserRole
from .dtos import AuthResponse, UserInfo
from .signup_dto import FederatedPrincipal
from .signup_use_case import is_allowed_email

logger = logging.getLogger(__name__)


class FederatedLoginUseCase:
    """
    Business Rules:
    - Lookup order: provider id, then email (the provider id gets linked)
    - Unknown principals become verified students without a password
    - Emails outside the institution domain are rejected
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, principal: FederatedPrincipal) -> Result[AuthResponse]:
        email = principal.email.strip().lower()
        if not is_allowed_email(email):
            return Return.err(
                Error(
                    "EMAIL_DOMAIN_NOT_ALLOWED",
                    f"Only @{ApplicationConfig.ALLOWED_EMAIL_DOMAIN} accounts are allowed",
                )
            )

        async with self.uow:
            user = await self.uow.users.get_by_google_id(principal.provider_id)

            if user is None:
                user = await self.uow.users.get_by_email(email)
                if user is not None:
                    user.google_id = principal.provider_id
                    if not user.profile_pic:
                        user.profile_pic = principal.profile_pic
                    user = await self.uow.users.update(user)
                    logger.info(f"Linked federated identity to user {user.id}")

            if user is None:
                user = await self.uow.users.create(
                    User(
                        name=principal.name,
                        email=email,
                        google_id=principal.provider_id,
                        profile_pic=principal.profile_pic,
                        role=UserRole.student,
                        is_verified=True,
                    )
                )
                logger.info(f"Created federated user {user.id}")

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
