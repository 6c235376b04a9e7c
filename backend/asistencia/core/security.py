from datetime import datetime, timedelta, timezone

from jose import jwt

from asistencia.core.config import settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Token shaped like the ones the auth provider issues (service accounts, tests)."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "aud": settings.JWT_AUDIENCE})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate JWT. Raises JWTError on failure."""
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        options={"require_aud": True, "require_exp": True},
    )
