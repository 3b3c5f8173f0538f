"""
Auth Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import Branch, UserRole

# Export all entities
from .user import User
from .refresh_token import RefreshToken
from .password_reset_token import PasswordResetToken

__all__ = [
    # Enums
    "Branch",
    "UserRole",
    # Entities
    "User",
    "RefreshToken",
    "PasswordResetToken",
]
