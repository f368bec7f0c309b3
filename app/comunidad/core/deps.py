from urllib.parse import quote

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.comunidad.core.config import settings
from app.comunidad.core.context import RequestContext, build_request_context
from app.comunidad.core.error_catalog import AppError, AuthRedirect, ErrorCatalog
from app.comunidad.core.security import get_session

bearer_scheme = HTTPBearer(auto_error=False)

SESSION_COOKIE = "access_token"


def get_optional_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> RequestContext:
    token = credentials.credentials if credentials else request.cookies.get(SESSION_COOKIE)
    session = get_session(token)
    context = build_request_context(session=session, trace_id=getattr(request.state, "trace_id", ""))
    request.state.context = context
    request.state.user_id = context.user_id
    return context


def require_session(context: RequestContext = Depends(get_optional_context)) -> RequestContext:
    if context.session is None:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    return context


def require_admin(context: RequestContext = Depends(require_session)) -> RequestContext:
    if not context.is_admin:
        raise AppError(ErrorCatalog.PERMISSION_DENIED)
    return context


def require_admin_page(request: Request, context: RequestContext = Depends(get_optional_context)) -> RequestContext:
    if context.session is None:
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        location = f"{settings.LOGIN_PATH}?redirect={quote(target, safe='/')}"
        raise AuthRedirect(location, reason="NO_SESSION")
    if not context.is_admin:
        raise AuthRedirect("/", reason="NOT_ADMIN")
    return context


__all__ = [
    "get_optional_context",
    "require_session",
    "require_admin",
    "require_admin_page",
]
