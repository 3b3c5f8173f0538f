"""
Integration tests for POST /auth/refresh
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from auth_service.api.utils.jwt import generate_refresh_token, verify_access_token
from auth_service.app.services.credential_tokens import generate_token, hash_token
from auth_service.domain.base import utcnow
from auth_service.domain.entities import RefreshToken


@pytest.mark.asyncio
async def test_refresh_returns_new_access_token(client: AsyncClient, signed_up):
    response = await client.post("/auth/refresh", json={"refreshToken": signed_up["refreshToken"]})

    assert response.status_code == 200
    data = response.json()
    assert list(data.keys()) == ["accessToken"]
    payload = verify_access_token(data["accessToken"])
    assert payload["user_id"] == signed_up["user"]["id"]
    assert payload["email"] == "asha@mictech.edu.in"
    assert payload["role"] == "student"


@pytest.mark.asyncio
async def test_refresh_accepts_snake_case_body(client: AsyncClient, signed_up):
    response = await client.post("/auth/refresh", json={"refresh_token": signed_up["refreshToken"]})

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_refresh_token_is_not_rotated(client: AsyncClient, signed_up):
    first = await client.post("/auth/refresh", json={"refreshToken": signed_up["refreshToken"]})
    second = await client.post("/auth/refresh", json={"refreshToken": signed_up["refreshToken"]})

    assert first.status_code == 200
    assert second.status_code == 200


@pytest.mark.asyncio
async def test_refresh_missing_token_returns_400(client: AsyncClient):
    empty = await client.post("/auth/refresh", json={})
    no_body = await client.post("/auth/refresh")

    for response in (empty, no_body):
        assert response.status_code == 400
        assert response.json()["error"] == {
            "code": "REFRESH_TOKEN_REQUIRED",
            "message": "Refresh token required",
        }


@pytest.mark.asyncio
async def test_refresh_rejects_garbage(client: AsyncClient):
    response = await client.post("/auth/refresh", json={"refreshToken": "not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient, signed_up):
    response = await client.post("/auth/refresh", json={"refreshToken": signed_up["accessToken"]})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rejects_signed_but_unstored_token(client: AsyncClient, signed_up):
    forged = generate_refresh_token(
        signed_up["user"]["id"], jti=generate_token(), expires_delta=timedelta(days=7)
    )

    response = await client.post("/auth/refresh", json={"refreshToken": forged})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_deletes_expired_row(client: AsyncClient, db_session: AsyncSession, signed_up):
    token_hash = hash_token(signed_up["refreshToken"])
    record = (await db_session.exec(select(RefreshToken).where(RefreshToken.token_hash == token_hash))).one()
    record.expires_at = utcnow() - timedelta(seconds=1)
    db_session.add(record)
    await db_session.commit()

    response = await client.post("/auth/refresh", json={"refreshToken": signed_up["refreshToken"]})

    assert response.status_code == 401
    remaining = (await db_session.exec(select(RefreshToken).where(RefreshToken.token_hash == token_hash))).all()
    assert remaining == []
