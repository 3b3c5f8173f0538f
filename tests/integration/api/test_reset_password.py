"""
Integration tests for POST /auth/reset-password
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from auth_service.domain.base import utcnow
from auth_service.domain.entities import PasswordResetToken, RefreshToken

EMAIL = "asha@mictech.edu.in"


async def request_reset_token(client: AsyncClient, email_sender) -> str:
    response = await client.post("/auth/forgot-password", json={"email": EMAIL})
    assert response.status_code == 200
    return email_sender.last_reset_token(EMAIL)


def reset_body(token: str, password: str = "new-password", confirm: str = None) -> dict:
    return {"token": token, "password": password, "confirmPassword": confirm or password}


@pytest.mark.asyncio
async def test_reset_password_success(client: AsyncClient, signed_up, email_sender, test_data):
    token = await request_reset_token(client, email_sender)

    response = await client.post("/auth/reset-password", json=reset_body(token))

    assert response.status_code == 200
    assert response.json() == {"message": test_data.get("messages")["reset_password"]}

    old_login = await client.post("/auth/login", json={"email": EMAIL, "password": "password1"})
    new_login = await client.post("/auth/login", json={"email": EMAIL, "password": "new-password"})
    assert old_login.status_code == 401
    assert new_login.status_code == 200


@pytest.mark.asyncio
async def test_reset_password_token_is_single_use(client: AsyncClient, signed_up, email_sender, test_data):
    token = await request_reset_token(client, email_sender)

    first = await client.post("/auth/reset-password", json=reset_body(token))
    second = await client.post("/auth/reset-password", json=reset_body(token, "another-password"))

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["error"] == {
        "code": "INVALID_TOKEN",
        "message": test_data.get("messages")["invalid_reset_token"],
    }


@pytest.mark.asyncio
async def test_reset_password_revokes_refresh_tokens(
    client: AsyncClient, db_session: AsyncSession, signed_up, email_sender
):
    await client.post("/auth/login", json={"email": EMAIL, "password": "password1"})
    token = await request_reset_token(client, email_sender)

    response = await client.post("/auth/reset-password", json=reset_body(token))

    assert response.status_code == 200
    assert (await db_session.exec(select(RefreshToken))).all() == []
    refresh = await client.post("/auth/refresh", json={"refreshToken": signed_up["refreshToken"]})
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_reset_password_expired_token(
    client: AsyncClient, db_session: AsyncSession, signed_up, email_sender
):
    token = await request_reset_token(client, email_sender)
    record = (await db_session.exec(select(PasswordResetToken))).one()
    record.expires_at = utcnow() - timedelta(seconds=1)
    db_session.add(record)
    await db_session.commit()

    response = await client.post("/auth/reset-password", json=reset_body(token))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"
    login = await client.post("/auth/login", json={"email": EMAIL, "password": "password1"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_reset_password_unknown_token(client: AsyncClient, signed_up):
    response = await client.post("/auth/reset-password", json=reset_body("a" * 64))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, field, message",
    [
        (reset_body("abc"), "token", "Invalid reset token format"),
        (reset_body("a" * 64, "short"), "password", "Password must be at least 8 characters"),
        (reset_body("a" * 64, "new-password", "other-password"), "confirmPassword", "Passwords do not match"),
    ],
)
async def test_reset_password_validation(client: AsyncClient, body, field, message):
    response = await client.post("/auth/reset-password", json=body)

    assert response.status_code == 400
    assert {"field": field, "message": message} in response.json()["errors"]
