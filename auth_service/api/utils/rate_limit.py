import logging
from json import JSONDecodeError

from fastapi import Depends, Request, Response

from auth_service.api.error import RateLimitExceeded
from auth_service.app.services.rate_limiter import IRateLimiter, RateLimitRule
from auth_service.depends import get_rate_limiter

logger = logging.getLogger(__name__)

STATE_HEADERS = "rate_limit_headers"


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def _body_email(request: Request) -> str:
    try:
        body = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        return ""
    email = body.get("email") if isinstance(body, dict) else None
    return email.strip().lower() if isinstance(email, str) else ""


class RateLimitDependency:
    """
    Route dependency enforcing a fixed window rule.

    Keys are "<rule>:<ip>:<email>" when per_email is set, "<ip>" otherwise.
    The X-RateLimit-* headers go on the success response and are parked on
    request.state so exception handlers can add them to error responses.
    """

    def __init__(self, rule: RateLimitRule, per_email: bool = True):
        self.rule = rule
        self.per_email = per_email

    async def key_for(self, request: Request) -> str:
        ip = client_ip(request)
        if not self.per_email:
            return ip
        return f"{self.rule.name}:{ip}:{await _body_email(request)}"

    async def __call__(
        self,
        request: Request,
        response: Response,
        limiter: IRateLimiter = Depends(get_rate_limiter),
    ) -> None:
        key = await self.key_for(request)
        decision = limiter.admit(key, self.rule)
        headers = decision.headers()
        setattr(request.state, STATE_HEADERS, headers)

        if not decision.allowed:
            logger.warning(f"Rate limit '{self.rule.name}' exceeded for {client_ip(request)}")
            raise RateLimitExceeded(decision, self.rule.message)

        for name, value in headers.items():
            response.headers[name] = value


def rate_limit_headers(request: Request) -> dict:
    return getattr(request.state, STATE_HEADERS, None) or {}
