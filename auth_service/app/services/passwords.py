from functools import lru_cache
from typing import Optional

import bcrypt

from config import ApplicationConfig

# bcrypt only considers the first 72 bytes
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (cost factor BCRYPT_ROUNDS)"""
    hashed = bcrypt.hashpw(_encode(password), bcrypt.gensalt(ApplicationConfig.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


@lru_cache(maxsize=1)
def _dummy_hash() -> bytes:
    return hash_password("dummy_password").encode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """
    Constant-shape password check.

    Accounts without a password hash still pay for one bcrypt comparison
    so that response timing does not reveal whether the account exists.
    """
    if not password_hash:
        bcrypt.checkpw(_encode(password), _dummy_hash())
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        return False
