"""
Credential Token Stores

Issue, verify and consume the secrets that stand in for a password:
password reset tokens (single-use, 15 minutes) and refresh tokens
(multi-device, 7 days). Only SHA-256 digests are ever persisted.
"""

import hashlib
import re
import secrets
from datetime import timedelta
from typing import Optional
from uuid import UUID

from auth_service.api.utils.jwt import generate_refresh_token, verify_refresh_token
from auth_service.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from auth_service.app.repositories.refresh_token_repository import IRefreshTokenRepository
from auth_service.domain.base import utcnow
from auth_service.domain.entities import PasswordResetToken, RefreshToken

TOKEN_BYTES = 32
_RESET_TOKEN_PATTERN = re.compile(r"[0-9a-f]{64}")


def generate_token() -> str:
    """32 cryptographically secure random bytes, hex encoded (64 chars)"""
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(token: str) -> str:
    """SHA-256 hex digest of a plaintext token"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def is_well_formed_reset_token(token: Optional[str]) -> bool:
    return bool(token) and _RESET_TOKEN_PATTERN.fullmatch(token) is not None


class PasswordResetTokenStore:
    """
    Single-use password reset tokens.

    Business Rules:
    - Issuing a token invalidates every unused token of the same user
    - Verification requires used = False and expires_at > now
    - Consumption is a conditional write, a second consume fails
    - Callers hold password_reset_issue_locks for the user across issue and commit
    """

    def __init__(self, repository: IPasswordResetTokenRepository, ttl: timedelta):
        self.repository = repository
        self.ttl = ttl

    async def issue(self, user_id: UUID) -> str:
        """
        Issue a new reset token for a user.

        Returns:
            The plaintext token, to be delivered out of band
        """
        await self.repository.invalidate_active_by_user_id(user_id)

        plain_token = generate_token()
        await self.repository.create(
            PasswordResetToken(
                user_id=user_id,
                token_hash=hash_token(plain_token),
                used=False,
                expires_at=utcnow() + self.ttl,
            )
        )
        return plain_token

    async def verify(self, plain_token: str) -> Optional[PasswordResetToken]:
        """Return the active record for a token, or None. Malformed tokens skip the lookup."""
        if not is_well_formed_reset_token(plain_token):
            return None
        return await self.repository.get_active_by_token_hash(hash_token(plain_token), utcnow())

    async def consume(self, record: PasswordResetToken) -> bool:
        """Mark a verified record as used. Returns False if someone else consumed it first."""
        consumed = await self.repository.mark_used(record.id)
        if consumed:
            record.used = True
        return consumed


class RefreshTokenStore:
    """
    Persisted refresh tokens.

    The plaintext is a signed JWT (user_id, type=refresh, random jti, exp),
    the database keeps its SHA-256 digest. Several tokens per user may be
    active at once, one per device.
    """

    def __init__(self, repository: IRefreshTokenRepository, ttl: timedelta):
        self.repository = repository
        self.ttl = ttl

    async def issue(self, user_id: UUID) -> str:
        plain_token = generate_refresh_token(user_id, jti=generate_token(), expires_delta=self.ttl)
        await self.repository.create(
            RefreshToken(
                user_id=user_id,
                token_hash=hash_token(plain_token),
                expires_at=utcnow() + self.ttl,
            )
        )
        return plain_token

    async def find_active(self, plain_token: str) -> Optional[RefreshToken]:
        """
        Verify signature and claims, then require a stored, unexpired row.

        An expired row is deleted on the way out and treated as missing.
        """
        payload = verify_refresh_token(plain_token)
        if payload is None:
            return None

        try:
            user_id = UUID(payload["user_id"])
        except ValueError:
            return None

        record = await self.repository.get_by_token_hash(hash_token(plain_token), user_id)
        if record is None:
            return None

        if record.expires_at <= utcnow():
            await self.repository.delete_by_id(record.id)
            return None

        return record

    async def revoke(self, plain_token: str) -> bool:
        return await self.repository.delete_by_token_hash(hash_token(plain_token))

    async def revoke_all(self, user_id: UUID) -> int:
        return await self.repository.delete_all_by_user_id(user_id)
