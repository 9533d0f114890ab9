"""Create and decode JWT access tokens."""
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from skillswap.config import settings


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Encode a payload into a JWT. Use 'sub' for user id (string)."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode["exp"] = expire
    to_encode["iss"] = settings.JWT_ISSUER
    to_encode["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_user_token(user_id: int, username: str, roles: list[str], profile_id: int | None = None) -> str:
    """Token carrying what the client needs for UI gating: id, username, roles and profileId if any."""
    claims: dict[str, Any] = {"sub": str(user_id), "unique_name": username, "roles": list(roles)}
    if profile_id is not None:
        claims["profileId"] = profile_id
    return create_access_token(claims)


def decode_token(token: str) -> dict[str, Any] | None:
    """Decode and validate JWT; return payload or None if invalid/expired."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
        return payload
    except JWTError:
        return None
