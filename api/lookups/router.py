"""
FastAPI routers for lookup tables; one router per table, same shape.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from auth.context import RequestContext
from auth.dependencies import get_request_context
from core.params import parse_id

from . import service
from .tables import ALL_TABLES, LookupTable


class NameRequest(BaseModel):
    name: Any = None


def build_router(table: LookupTable) -> APIRouter:
    router = APIRouter(prefix=table.path, dependencies=[Depends(get_request_context)])

    @router.get("")
    async def list_rows() -> list[dict]:
        return await service.list_rows(table)

    @router.get("/{row_id}")
    async def get_row(row_id: str) -> dict:
        return await service.get_row(table, parse_id(row_id, table.invalid_id_message))

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_row(payload: NameRequest | None = None) -> dict:
        return await service.create_row(table, (payload or NameRequest()).name)

    @router.patch("/{row_id}")
    async def rename_row(row_id: str, payload: NameRequest | None = None) -> dict:
        row_key = parse_id(row_id, table.invalid_id_message)
        return await service.rename_row(table, row_key, (payload or NameRequest()).name)

    @router.delete("/{row_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_row(row_id: str) -> Response:
        await service.delete_row(table, parse_id(row_id, table.invalid_id_message))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


routers = [build_router(table) for table in ALL_TABLES]
