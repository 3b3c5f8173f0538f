from typing import Optional

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from auth_service.libs.result import Error
from auth_service.adapter.services.email_sender import LoggingEmailSender, SmtpEmailSender
from auth_service.adapter.services.in_memory_rate_limiter import InMemoryRateLimiter
from auth_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from auth_service.api.error import ClientError
from auth_service.api.utils.jwt import verify_access_token
from auth_service.app.services.email_sender import IEmailSender
from auth_service.app.services.rate_limiter import IRateLimiter

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

# Process-wide counters shared by every rate limited route
rate_limiter = InMemoryRateLimiter()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_rate_limiter() -> IRateLimiter:
    return rate_limiter


def build_email_sender(config=ApplicationConfig) -> IEmailSender:
    """SMTP when credentials are configured, otherwise a sender that only logs."""
    if not (config.SMTP_USER and config.SMTP_PASS):
        return LoggingEmailSender()
    return SmtpEmailSender(
        host=config.SMTP_HOST,
        port=config.SMTP_PORT,
        username=config.SMTP_USER,
        password=config.SMTP_PASS,
        secure=config.SMTP_SECURE,
        from_name=config.MAIL_FROM_NAME,
        timeout=config.SMTP_TIMEOUT,
    )


def get_email_sender() -> IEmailSender:
    return build_email_sender(ApplicationConfig)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT access token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id, email, role

    Raises:
        ClientError: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Access token required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_access_token(credentials.credentials)

    if payload is None:
        raise ClientError(
            Error("INVALID_TOKEN", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return payload
