"""
Lookup table business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from core.errors import NotFoundError, ValidationError, store_errors

from . import repository
from .tables import LookupTable

logger = logging.getLogger(__name__)


def _to_response(table: LookupTable, row: dict) -> dict:
    return {table.id_column: int(row[table.id_column]), "name": str(row["name"])}


def _clean_name(raw: Any) -> str:
    name = str(raw if raw is not None else "").strip()
    if not name:
        raise ValidationError("name is required")
    return name


async def list_rows(table: LookupTable) -> list[dict]:
    with store_errors(f"{table.table}_list"):
        rows = await repository.list_rows(table)
    return [_to_response(table, row) for row in rows]


async def get_row(table: LookupTable, row_id: int) -> dict:
    with store_errors(f"{table.table}_get"):
        row = await repository.get_row(table, row_id)
    if row is None:
        raise NotFoundError(table.not_found_message)
    return _to_response(table, row)


async def create_row(table: LookupTable, raw_name: Any) -> dict:
    name = _clean_name(raw_name)
    with store_errors(f"{table.table}_create", conflict_message=table.conflict_message):
        row = await repository.insert_row(table, name)
    logger.info("%s_created id=%s", table.table, row[table.id_column])
    return _to_response(table, row)


async def rename_row(table: LookupTable, row_id: int, raw_name: Any) -> dict:
    name = _clean_name(raw_name)
    with store_errors(f"{table.table}_update", conflict_message=table.conflict_message):
        row = await repository.rename_row(table, row_id, name)
    if row is None:
        raise NotFoundError(table.not_found_message)
    logger.info("%s_updated id=%s", table.table, row_id)
    return _to_response(table, row)


async def delete_row(table: LookupTable, row_id: int) -> None:
    with store_errors(f"{table.table}_delete"):
        deleted = await repository.delete_row(table, row_id)
    if not deleted:
        raise NotFoundError(table.not_found_message)
    logger.info("%s_deleted id=%s", table.table, row_id)
