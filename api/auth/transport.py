"""
How a session id travels between client and server.

Browsers get an httpOnly cookie. Non-browser clients may send the id in the
development header or as `Authorization: Bearer <id>`. Lookup order is
cookie, header, bearer; the first non-empty value wins.
"""

from __future__ import annotations

from typing import Mapping

from fastapi import Request, Response

from core.settings import SessionCookieSettings


def extract_session_id(
    cookies: Mapping[str, str],
    headers: Mapping[str, str],
    settings: SessionCookieSettings,
) -> str | None:
    from_cookie = (cookies.get(settings.name) or "").strip()
    if from_cookie:
        return from_cookie

    from_header = (headers.get(settings.header_name) or "").strip()
    if from_header:
        return from_header

    auth = headers.get("authorization") or ""
    if auth[:7].lower() == "bearer ":
        token = auth[7:].strip()
        if token:
            return token
    return None


def session_id_from_request(request: Request, settings: SessionCookieSettings) -> str | None:
    return extract_session_id(request.cookies, request.headers, settings)


def set_session_cookie(response: Response, session_id: str, settings: SessionCookieSettings) -> None:
    response.set_cookie(
        key=settings.name,
        value=session_id,
        max_age=settings.max_age_seconds,
        path="/",
        secure=settings.secure,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: SessionCookieSettings) -> None:
    response.delete_cookie(
        key=settings.name,
        path="/",
        secure=settings.secure,
        httponly=True,
        samesite="lax",
    )
