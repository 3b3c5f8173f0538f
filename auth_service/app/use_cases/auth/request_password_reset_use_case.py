"""
Request Password Reset Use Case

Handles generating and sending password reset tokens.
"""

import logging
from datetime import timedelta
from typing import Callable, Optional

from auth_service.libs.result import Result, Return

from config import ApplicationConfig
from auth_service.app.services.credential_tokens import PasswordResetTokenStore
from auth_service.app.services.email_sender import (
    EmailMessage,
    IEmailSender,
    build_password_reset_email,
    build_reset_url,
)
from auth_service.app.services.keyed_lock import password_reset_issue_locks
from auth_service.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent."
)


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - 32 random bytes, hex encoded; only the SHA-256 digest is stored
    - Token expires in PASSWORD_RESET_EXPIRE_MINUTES (15)
    - Issuing a token invalidates the user's earlier unused tokens
    - No email enumeration: registered, unregistered and federated-only
      emails all receive the same response
    - Delivery failures are logged and never change the response
    - With a scheduler, delivery runs after the response is sent so
      response timing is the same for every email
    - Rate limiting is handled at the route layer
    """

    def __init__(
        self,
        uow: UnitOfWork,
        email_sender: IEmailSender,
        frontend_url: str = None,
        schedule: Optional[Callable] = None,
    ):
        self.uow = uow
        self.email_sender = email_sender
        self.frontend_url = frontend_url or ApplicationConfig.FRONTEND_URL
        self.schedule = schedule

    async def execute(self, email: str) -> Result[MessageResponse]:
        """
        Execute request password reset use case.

        Args:
            email: User's email address

        Returns:
            Result with the generic confirmation message
        """
        response = MessageResponse(message=FORGOT_PASSWORD_MESSAGE)
        expires_minutes = ApplicationConfig.PASSWORD_RESET_EXPIRE_MINUTES

        async with self.uow:
            user = await self.uow.users.get_by_email(email.strip().lower())

            if user is None:
                logger.info("Password reset requested for unknown email")
                return Return.ok(response)

            if not user.has_password:
                logger.info(f"Password reset requested for federated-only user {user.id}")
                return Return.ok(response)

            async with password_reset_issue_locks.hold(user.id):
                reset_tokens = PasswordResetTokenStore(
                    self.uow.password_reset_tokens,
                    ttl=timedelta(minutes=expires_minutes),
                )
                plain_token = await reset_tokens.issue(user.id)
                await self.uow.commit()

            user_id, user_email, user_name = user.id, user.email, user.name

        message = build_password_reset_email(
            user_name,
            build_reset_url(self.frontend_url, plain_token),
            expires_minutes,
            app_name=ApplicationConfig.MAIL_FROM_NAME,
        )
        if self.schedule is None:
            await self.deliver(user_id, user_email, message)
        else:
            self.schedule(self.deliver, user_id, user_email, message)

        return Return.ok(response)

    async def deliver(self, user_id, to: str, message: EmailMessage) -> bool:
        """Send the reset email. Failures are logged, never raised."""
        try:
            sent = await self.email_sender.send(to, message.subject, message.html, message.text)
        except Exception:
            logger.exception(f"Password reset email for user {user_id} raised")
            sent = False

        if sent:
            logger.info(f"Password reset email sent to user {user_id}")
        else:
            logger.error(f"Password reset email could not be delivered to user {user_id}")
        return sent
