"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
Serialized with camelCase keys to match the web client.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from auth_service.domain.entities import User


def _value(member):
    return getattr(member, "value", member)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Nested Models
# ============================================================================


class UserInfo(CamelModel):
    """Public projection of a user. Never carries the password hash."""

    id: str
    name: str
    email: str
    role: str
    branch: Optional[str] = None
    semester: Optional[int] = None
    section: Optional[str] = None
    profile_pic: Optional[str] = None
    reputation: int = 0
    uploads_count: int = 0
    is_verified: bool = False

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=_value(user.role),
            branch=_value(user.branch),
            semester=user.semester,
            section=user.section,
            profile_pic=user.profile_pic,
            reputation=user.reputation,
            uploads_count=user.uploads_count,
            is_verified=user.is_verified,
        )


# ============================================================================
# Response DTOs
# ============================================================================


class AuthResponse(CamelModel):
    """Response for signup, login and federated login use cases"""

    message: str
    user: UserInfo
    access_token: str
    refresh_token: str


class RefreshTokenResponse(CamelModel):
    """Response for refresh token use case"""

    access_token: str


class MessageResponse(CamelModel):
    """Response for logout, forgot-password and reset-password use cases"""

    message: str


class VerifyResetTokenResponse(CamelModel):
    """Response for verify reset token use case"""

    valid: bool


class CurrentUserResponse(CamelModel):
    """Response for current user use case"""

    user: UserInfo
