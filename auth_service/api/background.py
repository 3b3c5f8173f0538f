import asyncio
import logging
from typing import Awaitable, Callable

from auth_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from auth_service.app.services.rate_limiter import IRateLimiter
from auth_service.app.use_cases.maintenance import PurgeExpiredTokensUseCase

logger = logging.getLogger(__name__)


async def run_periodically(name: str, interval_seconds: float, job: Callable[[], Awaitable[None]]):
    """Run job every interval until cancelled. A failing run is logged and the loop goes on."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await job()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"Background job '{name}' failed")


def rate_limiter_sweep(limiter: IRateLimiter) -> Callable[[], Awaitable[None]]:
    async def job():
        limiter.sweep()

    return job


def token_purge(session_factory) -> Callable[[], Awaitable[None]]:
    async def job():
        async with session_factory() as session:
            await PurgeExpiredTokensUseCase(SqlAlchemyUnitOfWork(session)).execute()

    return job
