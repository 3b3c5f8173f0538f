"""
RefreshToken Entity

Persisted refresh tokens, one row per signed-in device.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from auth_service.domain.base import utcnow


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - a long-lived session credential.

    Business Rules:
    - Only the SHA-256 digest of the token is stored
    - Expires 7 days after issuance
    - Several rows per user are allowed (multi-device)
    - Deleted on logout, on expiry and on password reset
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    token_hash: str = Field(max_length=64, unique=True)  # SHA-256 output

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (Index("idx_refresh_token_expires_at", "expires_at"),)
