"""
Contract business logic.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from core.errors import NotFoundError, ValidationError, store_errors
from lookups import repository as lookups_repository
from lookups.tables import DEPARTMENTS, STATUSES, LookupTable

from . import fields, repository

logger = logging.getLogger(__name__)

NOT_FOUND = "Contract not found"
CREATE_CONFLICT = "Conflict creating contract"
UPDATE_CONFLICT = "Conflict updating contract"

_NAME_LOOKUPS: tuple[tuple[str, LookupTable], ...] = (
    ("department", DEPARTMENTS),
    ("status", STATUSES),
)


def _require_object(payload: Any) -> Mapping[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return payload


async def resolve_names(values: dict[str, Any]) -> dict[str, Any]:
    """
    Replace department/status names with their ids.

    An id already present wins over the name. A name that matches nothing is
    dropped without error, leaving the id unset.
    """
    resolved = dict(values)
    for name_field, table in _NAME_LOOKUPS:
        name = resolved.pop(name_field, None)
        if resolved.get(table.id_column) is not None:
            continue
        if not isinstance(name, str) or not name.strip():
            continue
        found = await lookups_repository.find_id_by_name(table, name.strip())
        if found is not None:
            resolved[table.id_column] = found
        else:
            logger.info("contract_name_unresolved field=%s", name_field)
    return resolved


async def list_contracts(*, limit: int, offset: int) -> list[dict[str, Any]]:
    with store_errors("contract_list"):
        return await repository.list_contracts(limit=limit, offset=offset)


async def get_contract(contract_id: int) -> dict[str, Any]:
    with store_errors("contract_get"):
        row = await repository.get_contract(contract_id)
    if row is None:
        raise NotFoundError(NOT_FOUND)
    return row


async def create_contract(payload: Any, *, actor_id: int | None) -> dict[str, Any]:
    values = fields.sanitize_create(_require_object(payload))
    if not values.get("title"):
        raise ValidationError("title is required")

    with store_errors("contract_create", conflict_message=CREATE_CONFLICT):
        values = await resolve_names(values)
        if actor_id is not None:
            values.setdefault("created_by", actor_id)
            values.setdefault("updated_by", actor_id)
        row = await repository.insert_contract(values)

    logger.info("contract_created contract_id=%s actor=%s", row.get("contract_id"), actor_id)
    return row


async def update_contract(contract_id: int, payload: Any, *, actor_id: int | None) -> dict[str, Any]:
    values = fields.sanitize_patch(_require_object(payload))

    with store_errors("contract_update", conflict_message=UPDATE_CONFLICT):
        values = await resolve_names(values)
        if not values:
            raise ValidationError("No fields provided for update")
        row = await repository.update_contract(contract_id, values, actor_id=actor_id)

    if row is None:
        raise NotFoundError(NOT_FOUND)
    logger.info("contract_updated contract_id=%s actor=%s fields=%s", contract_id, actor_id, ",".join(values))
    return row


async def delete_contract(contract_id: int) -> None:
    with store_errors("contract_delete"):
        deleted = await repository.delete_contract(contract_id)
    if not deleted:
        raise NotFoundError(NOT_FOUND)
    logger.info("contract_deleted contract_id=%s", contract_id)
