import logging
from typing import Awaitable, Optional, TypeVar
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.responses import JSONResponse
from pydantic import EmailStr, Field, ValidationInfo, field_validator

from config import ApplicationConfig
from auth_service.libs.result import Error, Result
from auth_service.api.error import ClientError, ServerError
from auth_service.api.utils.rate_limit import RateLimitDependency
from auth_service.app.services.email_sender import IEmailSender
from auth_service.app.services.rate_limiter import FORGOT_PASSWORD_RULE, LOGIN_RULE
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.app.use_cases.auth import (
    AuthResponse,
    ConfirmPasswordResetUseCase,
    CurrentUserResponse,
    LoginUseCase,
    LogoutUseCase,
    MessageResponse,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RequestPasswordResetUseCase,
    SignupCommand,
    SignupUseCase,
    VerifyResetTokenResponse,
    VerifyResetTokenUseCase,
)
from auth_service.app.use_cases.auth.dtos import CamelModel
from auth_service.app.use_cases.auth.signup_use_case import is_allowed_email
from auth_service.app.use_cases.users import LoadCurrentUserUseCase
from auth_service.domain.entities import Branch, UserRole
from auth_service.depends import get_current_user, get_email_sender, get_unit_of_work

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

T = TypeVar("T")


async def _execute(failure_message: str, pending: Awaitable[Result[T]]) -> Result[T]:
    """Await a use case, turning unexpected exceptions into a generic 500."""
    try:
        return await pending
    except Exception:
        logger.exception(failure_message)
        raise ServerError(Error("INTERNAL_ERROR", failure_message))


def _check_domain(email: str) -> str:
    email = email.strip().lower()
    if not is_allowed_email(email):
        raise ValueError(f"Email must end with @{ApplicationConfig.ALLOWED_EMAIL_DOMAIN}")
    return email


class SignupRequest(CamelModel):
    """
    Signup HTTP request payload

    Validates incoming HTTP request before converting to SignupCommand.
    API layer responsibility: HTTP validation and serialization.
    """

    name: str = Field(..., description="Full name (2-100 chars)")
    email: EmailStr = Field(..., description="College email address")
    password: str = Field(..., description="User password (min 8 chars)")
    role: UserRole = Field(UserRole.student, description="student or teacher")
    branch: Branch = Field(..., description="Branch code")
    semester: int = Field(..., description="Semester (1-8)")
    section: Optional[str] = Field(None, description="Section (max 50 chars)")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, value):
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required")
        value = value.strip()
        if not 2 <= len(value) <= 100:
            raise ValueError("Name must be 2-100 characters")
        return value

    @field_validator("email")
    @classmethod
    def validate_email_domain(cls, value: str) -> str:
        return _check_domain(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        return value

    @field_validator("semester")
    @classmethod
    def validate_semester(cls, value: int) -> int:
        if not 1 <= value <= 8:
            raise ValueError("Semester must be between 1 and 8")
        return value

    @field_validator("section", mode="before")
    @classmethod
    def validate_section(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if len(value) > 50:
                raise ValueError("Section must be at most 50 characters")
        return value


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def signup(request: SignupRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    User Signup

    Creates a student or teacher account for an institution email and
    returns an access token and a refresh token.

    Raises:
        - 400 Bad Request: Invalid input or email outside the institution domain
        - 409 Conflict: Email already exists
        - 500 Internal Server Error: Registration failed
    """
    command = SignupCommand(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
        branch=request.branch,
        semester=request.semester,
        section=request.section or None,
    )

    result = await _execute("Registration failed", SignupUseCase(uow).execute(command))

    if result.is_err():
        error = result.error
        if error.code == "EMAIL_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        if error.code == "EMAIL_DOMAIN_NOT_ALLOWED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class LoginRequest(CamelModel):
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=AuthResponse,
    dependencies=[Depends(RateLimitDependency(LOGIN_RULE))],
)
async def login(request: LoginRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    User Login

    Unknown email, federated-only account and wrong password produce the
    same 401 response.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 429 Too Many Requests: More than 10 attempts in 15 minutes
        - 500 Internal Server Error: Login failed
    """
    result = await _execute("Login failed", LoginUseCase(uow).execute(request.email, request.password))

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = Field(None, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: Optional[RefreshRequest] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Refresh Access Token

    Mints a new access token. The refresh token itself is not rotated.

    Raises:
        - 400 Bad Request: Refresh token missing
        - 401 Unauthorized: Invalid, expired or revoked refresh token
    """
    refresh_token = request.refresh_token if request else None
    result = await _execute(
        "Failed to refresh token", RefreshTokenUseCase(uow).execute(refresh_token)
    )

    if result.is_err():
        error = result.error
        if error.code == "REFRESH_TOKEN_REQUIRED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        if error.code == "INVALID_TOKEN":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(
    request: Optional[RefreshRequest] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Deletes the presented refresh token; succeeds even without one."""
    refresh_token = request.refresh_token if request else None
    result = await _execute("Logout failed", LogoutUseCase(uow).execute(refresh_token))

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ForgotPasswordRequest(CamelModel):
    email: EmailStr = Field(..., description="College email address")

    @field_validator("email")
    @classmethod
    def validate_email_domain(cls, value: str) -> str:
        return _check_domain(value)


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    dependencies=[Depends(RateLimitDependency(FORGOT_PASSWORD_RULE))],
)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: IEmailSender = Depends(get_email_sender),
):
    """
    Request Password Reset

    Security:
        - No email enumeration (same response for every email)
        - At most 3 requests per IP and email in 15 minutes
        - Token is 32 random bytes, only its SHA-256 digest is stored
        - The email goes out after the response is sent

    Returns:
        - 200 OK: Always, unless rate limited or the server fails
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        email_sender,
        ApplicationConfig.FRONTEND_URL,
        schedule=background_tasks.add_task,
    )
    result = await _execute(
        "Failed to process request. Please try again.", use_case.execute(request.email)
    )

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., description="Password reset token from email")
    password: str = Field(..., description="New password (min 8 chars)")
    confirm_password: str = Field(..., description="Must match password")

    @field_validator("token")
    @classmethod
    def validate_token(cls, value: str) -> str:
        if not value:
            raise ValueError("Reset token is required")
        if len(value) != 64:
            raise ValueError("Invalid reset token format")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        return value

    @field_validator("confirm_password")
    @classmethod
    def validate_confirm_password(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise ValueError("Confirm password is required")
        if value != info.data.get("password"):
            raise ValueError("Passwords do not match")
        return value


@router.post("/reset-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Confirm Password Reset

    Sets the new password, consumes the token and signs the user out of
    every device.

    Raises:
        - 400 Bad Request: Invalid input, or unknown, used or expired token
        - 500 Internal Server Error: Failed to reset password
    """
    result = await _execute(
        "Failed to reset password. Please try again.",
        ConfirmPasswordResetUseCase(uow).execute(request.token, request.password),
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_TOKEN":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.get(
    "/verify-reset-token/{token}",
    status_code=status.HTTP_200_OK,
    response_model=VerifyResetTokenResponse,
)
async def verify_reset_token(token: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    """Lets the reset page check a token before asking for a new password."""
    try:
        result = await VerifyResetTokenUseCase(uow).execute(token)
    except Exception:
        logger.exception("Failed to verify reset token")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"valid": False, "error": "Failed to verify token"},
        )

    if result.is_err():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"valid": False, "error": result.error.message},
        )

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=CurrentUserResponse)
async def get_me(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Load Current User

    Raises:
        - 401 Unauthorized: Missing or invalid access token, or the user is gone
    """
    try:
        user_id = UUID(current_user["user_id"])
    except ValueError:
        raise ClientError(
            Error("INVALID_TOKEN", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = await _execute("Failed to load user", LoadCurrentUserUseCase(uow).execute(user_id))

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value
