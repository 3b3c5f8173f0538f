"""
Integration tests for POST /auth/login
"""
import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from auth_service.domain.entities import User, UserRole


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, signed_up, test_data):
    response = await client.post(
        "/auth/login", json={"email": "asha@mictech.edu.in", "password": "password1"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == test_data.get("messages")["login"]
    assert data["user"]["id"] == signed_up["user"]["id"]
    assert data["accessToken"]
    assert data["refreshToken"] != signed_up["refreshToken"]


@pytest.mark.asyncio
async def test_login_is_case_insensitive_on_email(client: AsyncClient, signed_up):
    response = await client.post(
        "/auth/login", json={"email": "ASHA@mictech.edu.in", "password": "password1"}
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client: AsyncClient, db_session: AsyncSession, signed_up):
    db_session.add(
        User(
            name="Federated Only",
            email="google.only@mictech.edu.in",
            role=UserRole.student,
            google_id="google-123",
            is_verified=True,
        )
    )
    await db_session.commit()

    wrong_password = await client.post(
        "/auth/login", json={"email": "asha@mictech.edu.in", "password": "wrong-password"}
    )
    unknown_email = await client.post(
        "/auth/login", json={"email": "nobody@mictech.edu.in", "password": "wrong-password"}
    )
    federated_only = await client.post(
        "/auth/login", json={"email": "google.only@mictech.edu.in", "password": "wrong-password"}
    )

    for response in (wrong_password, unknown_email, federated_only):
        assert response.status_code == 401
        assert response.json() == {
            "error": {"code": "INVALID_CREDENTIALS", "message": "Invalid credentials"}
        }


@pytest.mark.asyncio
async def test_login_requires_password(client: AsyncClient):
    response = await client.post("/auth/login", json={"email": "asha@mictech.edu.in", "password": ""})

    assert response.status_code == 400
    assert {"field": "password", "message": "Password is required"} in response.json()["errors"]


@pytest.mark.asyncio
async def test_login_carries_rate_limit_headers(client: AsyncClient, signed_up):
    ok = await client.post(
        "/auth/login", json={"email": "asha@mictech.edu.in", "password": "password1"}
    )
    failed = await client.post(
        "/auth/login", json={"email": "asha@mictech.edu.in", "password": "wrong-password"}
    )

    assert ok.headers["X-RateLimit-Limit"] == "10"
    assert ok.headers["X-RateLimit-Remaining"] == "9"
    assert int(ok.headers["X-RateLimit-Reset"]) > 0
    assert failed.status_code == 401
    assert failed.headers["X-RateLimit-Remaining"] == "8"


@pytest.mark.asyncio
async def test_login_rate_limited_after_ten_attempts(client: AsyncClient, signed_up):
    payload = {"email": "asha@mictech.edu.in", "password": "wrong-password"}
    for _ in range(10):
        response = await client.post("/auth/login", json=payload)
        assert response.status_code == 401

    response = await client.post("/auth/login", json=payload)

    assert response.status_code == 429
    data = response.json()
    assert data == {
        "error": "Too many login attempts. Please try again in 15 minutes.",
        "retryAfter": data["retryAfter"],
    }
    assert 0 < data["retryAfter"] <= 900
    assert response.headers["Retry-After"] == str(data["retryAfter"])
    assert response.headers["X-RateLimit-Remaining"] == "0"

    # Counted per email, so another account from the same address is unaffected
    other = await client.post(
        "/auth/login", json={"email": "other@mictech.edu.in", "password": "wrong-password"}
    )
    assert other.status_code == 401
