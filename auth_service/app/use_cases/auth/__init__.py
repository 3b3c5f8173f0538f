"""
Authentication Use Cases

All authentication-related business logic.
"""

from .signup_use_case import SignupUseCase
from .signup_dto import SignupCommand, FederatedPrincipal
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .verify_reset_token_use_case import VerifyResetTokenUseCase
from .federated_login_use_case import FederatedLoginUseCase
from .dtos import (
    AuthResponse,
    CurrentUserResponse,
    MessageResponse,
    RefreshTokenResponse,
    UserInfo,
    VerifyResetTokenResponse,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "VerifyResetTokenUseCase",
    "FederatedLoginUseCase",
    # DTOs - Commands
    "SignupCommand",
    "FederatedPrincipal",
    # DTOs - Responses
    "AuthResponse",
    "RefreshTokenResponse",
    "MessageResponse",
    "VerifyResetTokenResponse",
    "CurrentUserResponse",
    # DTOs - Nested Models
    "UserInfo",
]
