"""
Use Cases

Organized into domain folders:
- auth/: Authentication flows
- users/: Current user
- maintenance/: Periodic housekeeping

Import from subdirectories for better organization.
"""

from .auth import (
    SignupUseCase,
    SignupCommand,
    LoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    RequestPasswordResetUseCase,
    ConfirmPasswordResetUseCase,
    VerifyResetTokenUseCase,
    FederatedLoginUseCase,
)
from .users import LoadCurrentUserUseCase
from .maintenance import PurgeExpiredTokensUseCase

__all__ = [
    # Auth
    "SignupUseCase",
    "SignupCommand",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "VerifyResetTokenUseCase",
    "FederatedLoginUseCase",
    # Users
    "LoadCurrentUserUseCase",
    # Maintenance
    "PurgeExpiredTokensUseCase",
]
