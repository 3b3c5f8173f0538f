"""
Integration tests for GET /auth/verify-reset-token/{token}
"""
import pytest
from httpx import AsyncClient
from unittest.mock import AsyncMock, MagicMock

from auth_service.depends import get_unit_of_work

EMAIL = "asha@mictech.edu.in"


@pytest.mark.asyncio
async def test_verify_valid_token(client: AsyncClient, signed_up, email_sender):
    await client.post("/auth/forgot-password", json={"email": EMAIL})
    token = email_sender.last_reset_token(EMAIL)

    first = await client.get(f"/auth/verify-reset-token/{token}")
    second = await client.get(f"/auth/verify-reset-token/{token}")

    assert first.status_code == 200
    assert first.json() == {"valid": True}
    # Verification does not consume
    assert second.status_code == 200


@pytest.mark.asyncio
async def test_verify_malformed_token(client: AsyncClient):
    response = await client.get("/auth/verify-reset-token/not-a-token")

    assert response.status_code == 400
    assert response.json() == {"valid": False, "error": "Invalid token format"}


@pytest.mark.asyncio
async def test_verify_unknown_token(client: AsyncClient):
    response = await client.get(f"/auth/verify-reset-token/{'0' * 64}")

    assert response.status_code == 400
    assert response.json() == {"valid": False, "error": "Invalid or expired reset token"}


@pytest.mark.asyncio
async def test_verify_used_token(client: AsyncClient, signed_up, email_sender):
    await client.post("/auth/forgot-password", json={"email": EMAIL})
    token = email_sender.last_reset_token(EMAIL)
    await client.post(
        "/auth/reset-password",
        json={"token": token, "password": "new-password", "confirmPassword": "new-password"},
    )

    response = await client.get(f"/auth/verify-reset-token/{token}")

    assert response.status_code == 400
    assert response.json()["valid"] is False


@pytest.mark.asyncio
async def test_verify_dependency_failure_returns_500(app, client: AsyncClient):
    broken_uow = MagicMock()
    broken_uow.__aenter__ = AsyncMock(side_effect=RuntimeError("database unavailable"))
    broken_uow.__aexit__ = AsyncMock(return_value=False)

    async def override_get_unit_of_work():
        yield broken_uow

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    response = await client.get(f"/auth/verify-reset-token/{'0' * 64}")

    assert response.status_code == 500
    assert response.json() == {"valid": False, "error": "Failed to verify token"}
