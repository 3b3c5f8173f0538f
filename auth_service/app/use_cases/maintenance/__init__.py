"""
Maintenance Use Cases

Housekeeping run by the application lifespan.
"""

from .purge_expired_tokens_use_case import PurgeExpiredTokensUseCase, PurgeReport

__all__ = [
    "PurgeExpiredTokensUseCase",
    "PurgeReport",
]
