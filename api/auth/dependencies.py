"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Request

from core.errors import AuthenticationError
from core.settings import Settings

from .context import RequestContext


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_request_context(request: Request) -> RequestContext:
    """
    The identity the gate resolved for this request.

    Routes behind the gate always have one; reaching a route without it means
    the gate was bypassed, which is treated as unauthenticated.
    """
    context = getattr(request.state, "context", None)
    if not isinstance(context, RequestContext):
        raise AuthenticationError("Not authenticated")
    return context
