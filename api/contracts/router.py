"""
FastAPI router for contract endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response, status

from auth.context import RequestContext
from auth.dependencies import get_request_context
from core.params import clamp_pagination, parse_id

from . import service

router = APIRouter(prefix="/contracts")

INVALID_ID = "Invalid contract_id"


@router.get("")
async def list_contracts(
    limit: str | None = Query(default=None),
    offset: str | None = Query(default=None),
    _: RequestContext = Depends(get_request_context),
) -> list[dict]:
    """
    Page through contracts; out-of-range paging values are clamped, not rejected.
    """
    limit_value, offset_value = clamp_pagination(limit, offset)
    return await service.list_contracts(limit=limit_value, offset=offset_value)


@router.get("/{contract_id}")
async def get_contract(
    contract_id: str,
    _: RequestContext = Depends(get_request_context),
) -> dict:
    return await service.get_contract(parse_id(contract_id, INVALID_ID))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_contract(
    payload: Any = Body(default=None),
    context: RequestContext = Depends(get_request_context),
) -> dict:
    return await service.create_contract(payload, actor_id=context.user_id)


@router.patch("/{contract_id}")
async def update_contract(
    contract_id: str,
    payload: Any = Body(default=None),
    context: RequestContext = Depends(get_request_context),
) -> dict:
    contract_key = parse_id(contract_id, INVALID_ID)
    return await service.update_contract(contract_key, payload, actor_id=context.user_id)


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract(
    contract_id: str,
    _: RequestContext = Depends(get_request_context),
) -> Response:
    await service.delete_contract(parse_id(contract_id, INVALID_ID))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
