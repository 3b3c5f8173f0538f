from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig

ALGORITHM = "HS256"


def generate_access_token(user_id, email: str, role: str) -> str:
    """
    Generate JWT access token

    Args:
        user_id: User UUID
        email: User email
        role: User role (student, teacher)

    Returns:
        JWT token string (HS256, ACCESS_TOKEN_EXPIRE_MINUTES expiry)
    """
    now = datetime.now(UTC)
    payload = {
        "user_id": str(user_id),
        "email": email,
        "role": role,
        "type": "access",
        "exp": now + timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_EXPIRE_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm=ALGORITHM)


def generate_refresh_token(user_id, jti: str, expires_delta: timedelta) -> str:
    """
    Generate JWT refresh token

    Args:
        user_id: User UUID
        jti: Random token identifier, makes every refresh token unique
        expires_delta: Token expiration duration

    Returns:
        JWT token string (HS256, signed with the refresh secret)
    """
    now = datetime.now(UTC)
    payload = {
        "user_id": str(user_id),
        "type": "refresh",
        "jti": jti,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_REFRESH_SECRET, algorithm=ALGORITHM)


def _decode(token: str, secret: str, token_type: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_type or not payload.get("user_id"):
        return None
    return payload


def verify_access_token(token: str) -> Optional[dict]:
    """
    Verify and decode JWT access token

    Returns:
        Decoded payload dict or None if invalid, expired or not an access token
    """
    return _decode(token, ApplicationConfig.JWT_SECRET, "access")


def verify_refresh_token(token: str) -> Optional[dict]:
    """
    Verify and decode JWT refresh token

    Returns:
        Decoded payload dict or None if invalid, expired or not a refresh token
    """
    return _decode(token, ApplicationConfig.JWT_REFRESH_SECRET, "refresh")
