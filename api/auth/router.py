"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from core.settings import Settings

from . import schemas, service, transport
from .context import RequestContext
from .dependencies import get_request_context, get_settings

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=schemas.LoginResponse)
async def login(
    response: Response,
    payload: schemas.LoginRequest | None = None,
    settings: Settings = Depends(get_settings),
) -> schemas.LoginResponse:
    result = await service.login(payload or schemas.LoginRequest())
    transport.set_session_cookie(response, result.session_id, settings.session)
    return schemas.LoginResponse(session_id=result.session_id, **result.account.model_dump())


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: Request, settings: Settings = Depends(get_settings)) -> Response:
    # Exempt from the gate, so the session id is read here directly.
    session_id = transport.session_id_from_request(request, settings.session)
    await service.logout(session_id)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    transport.clear_session_cookie(response, settings.session)
    return response


@router.get("/me", response_model=schemas.AccountView)
async def me(context: RequestContext = Depends(get_request_context)) -> schemas.AccountView:
    return context.account


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    payload: schemas.ChangePasswordRequest | None = None,
    context: RequestContext = Depends(get_request_context),
    settings: Settings = Depends(get_settings),
) -> Response:
    await service.change_password(
        context.account,
        payload or schemas.ChangePasswordRequest(),
        min_length=settings.min_password_length,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
