from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from app.comunidad.core.config import settings


class Session(BaseModel):
    user_id: str
    email: str | None = None
    role: str | None = None
    app_role: str | None = None
    expires_at: datetime | None = None


def create_session_token(
    user_id: str,
    *,
    email: str | None = None,
    app_role: str | None = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    claims: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "role": "authenticated",
        "aud": settings.AUTH_JWT_AUDIENCE,
        "exp": expire,
        "app_metadata": {"role": app_role} if app_role else {},
    }
    return jwt.encode(claims, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(
        token,
        settings.AUTH_JWT_SECRET,
        algorithms=[settings.AUTH_JWT_ALGORITHM],
        audience=settings.AUTH_JWT_AUDIENCE,
    )


def get_session(token: str | None) -> Session | None:
    """Decode a bearer token into a session, or None when absent or invalid."""
    if not token:
        return None
    try:
        payload = decode_token(token)
    except JWTError:
        return None
    app_metadata = payload.get("app_metadata") or {}
    expires_at = payload.get("exp")
    try:
        return Session(
            user_id=payload.get("sub"),
            email=payload.get("email"),
            role=payload.get("role"),
            app_role=app_metadata.get("role") if isinstance(app_metadata, dict) else None,
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc) if expires_at else None,
        )
    except (ValidationError, TypeError, ValueError):
        return None


def check_admin_role(session: Session | None) -> bool:
    if session is None:
        return False
    return session.app_role == settings.ADMIN_ROLE
