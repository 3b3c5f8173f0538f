import re
from typing import List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from auth_service.depends import get_email_sender, get_rate_limiter, get_unit_of_work
from auth_service.adapter.services.in_memory_rate_limiter import InMemoryRateLimiter
from auth_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from auth_service.app.services.email_sender import IEmailSender

RESET_LINK = re.compile(r"reset-password\?token=([0-9a-f]{64})")


class RecordingEmailSender(IEmailSender):
    """Keeps every message instead of sending it."""

    def __init__(self, result: bool = True):
        self.result = result
        self.sent: List[dict] = []

    async def send(self, to: str, subject: str, html: str, text: str) -> bool:
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})
        return self.result

    def last_reset_token(self, to: Optional[str] = None) -> Optional[str]:
        for message in reversed(self.sent):
            if to is None or message["to"] == to:
                match = RESET_LINK.search(message["text"])
                if match:
                    return match.group(1)
        return None


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def rate_limiter():
    return InMemoryRateLimiter()


@pytest.fixture
def app(db_session, email_sender, rate_limiter):
    from auth_service.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    return app


@pytest_asyncio.fixture
async def client(app):
    from httpx import ASGITransport

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def signed_up(client, test_data):
    """A registered student; returns the signup response body."""
    response = await client.post("/auth/signup", json=test_data.get_copy("signup_request"))
    assert response.status_code == 201
    return response.json()
