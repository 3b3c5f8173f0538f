"""
Signup Use Case DTOs (Data Transfer Objects)

Command/Response pattern for clean architecture separation:
- SignupCommand: Input to use case (validated business intent)
- AuthResponse: Output from use case (structured result)
"""

from typing import Optional

from pydantic import BaseModel

from auth_service.domain.entities import Branch, UserRole


class SignupCommand(BaseModel):
    """
    Signup command - represents validated signup intent

    Created by API layer after request validation passes.
    Contains only business-relevant data (no HTTP concerns).
    """

    name: str
    email: str
    password: str
    role: UserRole = UserRole.student
    branch: Branch
    semester: int
    section: Optional[str] = None


class FederatedPrincipal(BaseModel):
    """
    Identity asserted by the external identity provider.

    Produced only after the provider has verified the user.
    """

    provider_id: str
    email: str
    name: str
    profile_pic: Optional[str] = None
