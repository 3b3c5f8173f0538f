"""
Repository tests against SQLite: conditional consumption and expiry purge.
"""
from datetime import timedelta

import pytest
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from auth_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from auth_service.app.services.credential_tokens import PasswordResetTokenStore, hash_token
from auth_service.app.use_cases.maintenance import PurgeExpiredTokensUseCase
from auth_service.domain.base import utcnow
from auth_service.domain.entities import PasswordResetToken, RefreshToken, User, UserRole


async def create_user(db_session: AsyncSession) -> User:
    user = User(name="Asha", email="asha@mictech.edu.in", role=UserRole.student)
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.mark.asyncio
async def test_mark_used_succeeds_once(db_session: AsyncSession):
    user = await create_user(db_session)
    uow = SqlAlchemyUnitOfWork(db_session)

    async with uow:
        store = PasswordResetTokenStore(uow.password_reset_tokens, ttl=timedelta(minutes=15))
        plain = await store.issue(user.id)
        record = await store.verify(plain)
        first = await store.consume(record)
        second = await uow.password_reset_tokens.mark_used(record.id)
        await uow.commit()

    assert first is True
    assert second is False


@pytest.mark.asyncio
async def test_issue_invalidates_earlier_tokens(db_session: AsyncSession):
    user = await create_user(db_session)
    uow = SqlAlchemyUnitOfWork(db_session)

    async with uow:
        store = PasswordResetTokenStore(uow.password_reset_tokens, ttl=timedelta(minutes=15))
        first = await store.issue(user.id)
        second = await store.issue(user.id)
        await uow.commit()

        assert await store.verify(first) is None
        assert (await store.verify(second)).token_hash == hash_token(second)


@pytest.mark.asyncio
async def test_purge_removes_only_expired_rows(db_session: AsyncSession):
    user = await create_user(db_session)
    now = utcnow()
    db_session.add_all(
        [
            RefreshToken(user_id=user.id, token_hash="a" * 64, expires_at=now - timedelta(days=1)),
            RefreshToken(user_id=user.id, token_hash="b" * 64, expires_at=now + timedelta(days=1)),
            PasswordResetToken(user_id=user.id, token_hash="c" * 64, expires_at=now - timedelta(minutes=1)),
            PasswordResetToken(user_id=user.id, token_hash="d" * 64, expires_at=now + timedelta(minutes=10)),
        ]
    )
    await db_session.commit()

    result = await PurgeExpiredTokensUseCase(SqlAlchemyUnitOfWork(db_session)).execute()

    assert result.value.refresh_tokens == 1
    assert result.value.password_reset_tokens == 1
    refresh_hashes = [t.token_hash for t in (await db_session.exec(select(RefreshToken))).all()]
    reset_hashes = [t.token_hash for t in (await db_session.exec(select(PasswordResetToken))).all()]
    assert refresh_hashes == ["b" * 64]
    assert reset_hashes == ["d" * 64]
