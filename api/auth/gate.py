"""
Request gate: every request passes through here before reaching a route.

1. Exempt paths (login, logout) and CORS preflights go straight through.
2. Otherwise the session id must resolve to an account whose status still
   allows access; failures are 401 (and the stale cookie is cleared) or 403.
3. An account that must change its password may only reach a short list of
   paths until it does. This is checked on every request.

On success the resolved `RequestContext` is attached to the request for the
`get_request_context` dependency and the session's last-seen time is
refreshed in the background.
"""

from __future__ import annotations

import logging
from typing import Iterable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from core.errors import AuthenticationError, AuthorizationError, DomainError
from core.settings import SessionCookieSettings

from . import schemas, service, transport
from .context import RequestContext

logger = logging.getLogger(__name__)

EXEMPT_PATHS = frozenset({"/auth/login", "/auth/logout"})
PASSWORD_CHANGE_PATHS = frozenset({"/auth/change-password", "/auth/logout", "/auth/me", "/health"})

NOT_AUTHENTICATED = "Not authenticated"
PASSWORD_CHANGE_REQUIRED = "Password change required"


def normalize_path(path: str) -> str:
    if len(path) > 1:
        return path.rstrip("/") or "/"
    return path


def is_exempt_path(path: str, exempt: Iterable[str] = EXEMPT_PATHS) -> bool:
    """
    Exact match, or a match on whole trailing segments so nested mounts
    (e.g. /api/auth/login) stay exempt. /api/xauth/login does not match.
    """
    if not path:
        return False
    normalized = normalize_path(path)
    for candidate in exempt:
        # Candidates start with "/", so a suffix match always ends on a segment boundary.
        if normalized == candidate or normalized.endswith(candidate):
            return True
    return False


def allowed_while_password_must_change(path: str) -> bool:
    return normalize_path(path) in PASSWORD_CHANGE_PATHS


async def authorize(request: Request, settings: SessionCookieSettings) -> RequestContext:
    session_id = transport.session_id_from_request(request, settings)
    if not session_id:
        raise AuthenticationError(NOT_AUTHENTICATED)

    row = await service.current_account(session_id)
    if row is None:
        raise AuthenticationError(NOT_AUTHENTICATED)
    service.check_account_status(row)

    account = schemas.to_account_view(row)
    service.schedule_activity_refresh(session_id)

    if account.password_must_change and not allowed_while_password_must_change(request.url.path):
        raise AuthorizationError(PASSWORD_CHANGE_REQUIRED)
    return RequestContext(session_id=session_id, account=account)


class AuthGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, session_settings: SessionCookieSettings) -> None:
        super().__init__(app)
        self.session_settings = session_settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS" or is_exempt_path(request.url.path):
            return await call_next(request)

        try:
            context = await authorize(request, self.session_settings)
        except DomainError as exc:
            logger.info(
                "gate_rejected method=%s path=%s status=%s reason=%s",
                request.method,
                request.url.path,
                exc.status_code,
                exc.message,
            )
            response = JSONResponse(status_code=exc.status_code, content={"error": exc.message})
            if isinstance(exc, AuthenticationError):
                transport.clear_session_cookie(response, self.session_settings)
            return response

        request.state.context = context
        return await call_next(request)
