from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(
    external_id: str,
    email: Optional[str] = None,
    expires_delta: timedelta = timedelta(minutes=15),
) -> str:
    """
    Generate JWT access token

    Args:
        external_id: Identity provider user id, stored in the `sub` claim
        email: Optional primary email
        expires_delta: Token expiration duration

    Returns:
        JWT token string
    """
    now = datetime.now(UTC)
    payload = {
        "sub": external_id,
        "exp": now + expires_delta,
        "iat": now,
    }
    if email:
        payload["email"] = email
    return jwt.encode(
        payload, ApplicationConfig.JWT_SECRET, algorithm=ApplicationConfig.JWT_ALGORITHM
    )


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Returns:
        Decoded payload dict or None if invalid, expired or missing `sub`
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=[ApplicationConfig.JWT_ALGORITHM]
        )
    except JWTError:
        return None

    if not payload.get("sub"):
        return None
    return payload
