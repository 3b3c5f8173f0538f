from fastapi import status
from auth_service.libs.result import Error
from auth_service.app.services.rate_limiter import RateLimitDecision


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


class RateLimitExceeded(Exception):
    def __init__(self, decision: RateLimitDecision, message: str):
        self.decision = decision
        self.base_error = Error("RATE_LIMITED", message)
        super().__init__(message)
