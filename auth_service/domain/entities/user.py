"""
User Entity

Represents a student or teacher of the institution.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from auth_service.domain.base import utcnow
from .enums import Branch, UserRole


class User(SQLModel, table=True):
    """
    User entity - a member of the institution.

    Business Rules:
    - Email must be unique and belong to the allowed institution domain
    - Password stored as bcrypt hash; None for federated-only accounts
    - google_id links the account to the external identity provider
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(max_length=100)

    role: UserRole = Field(default=UserRole.student)
    branch: Optional[Branch] = Field(default=None)
    semester: Optional[int] = Field(default=None)
    section: Optional[str] = Field(default=None, max_length=50)

    password_hash: Optional[str] = Field(default=None, max_length=60)  # Bcrypt output
    google_id: Optional[str] = Field(default=None, unique=True, index=True, max_length=255)

    profile_pic: Optional[str] = Field(default=None, max_length=2048)
    reputation: int = Field(default=0)
    uploads_count: int = Field(default=0)
    is_verified: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_role_branch", "role", "branch"),)

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)
