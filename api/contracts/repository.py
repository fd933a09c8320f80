"""
Contract persistence (raw SQL).

Insert and update statements are built from the sanitized field set: column
names come only from the whitelist in `fields.py`, every value is a `$n`
parameter. Date columns are cast from text in SQL so the store does the
parsing and reports malformed dates itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core import db

from . import fields

CONTRACT_VIEW = """
    SELECT c.*,
           d.name AS department,
           s.name AS status,
           COALESCE(cu.name, cu.username) AS created_by_name,
           COALESCE(uu.name, uu.username) AS updated_by_name
    FROM contract c
    LEFT JOIN department d ON d.department_id = c.department_id
    LEFT JOIN status s ON s.status_id = c.status_id
    LEFT JOIN user_account cu ON cu.user_id = c.created_by
    LEFT JOIN user_account uu ON uu.user_id = c.updated_by
"""


@dataclass(frozen=True)
class Statement:
    sql: str
    args: tuple[Any, ...]


def _column_type(column: str) -> str:
    kind = fields.FIELDS.get(column) or fields.AUDIT_COLUMNS.get(column)
    if kind is None or column in fields.NAME_LOOKUPS:
        raise ValueError(f"Not a writable contract column: {column!r}")
    return kind


def _placeholder(column: str, index: int) -> str:
    if _column_type(column) == fields.DATE:
        return f"${index}::text::date"
    return f"${index}"


def build_insert(values: dict[str, Any]) -> Statement:
    if not values:
        raise ValueError("build_insert called with no values.")
    columns = list(values)
    column_list = ", ".join(f'"{column}"' for column in columns)
    placeholders = ", ".join(_placeholder(column, i) for i, column in enumerate(columns, start=1))
    sql = f"""
        INSERT INTO contract ({column_list})
        VALUES ({placeholders})
        RETURNING *
    """
    return Statement(sql=sql, args=tuple(values[column] for column in columns))


def build_update(contract_id: int, values: dict[str, Any], *, actor_id: int | None) -> Statement:
    """
    `$1` is always the contract id; field values follow, then the actor.
    """
    if not values:
        raise ValueError("build_update called with no values.")
    args: list[Any] = [contract_id]
    assignments: list[str] = []
    for column, value in values.items():
        args.append(value)
        assignments.append(f'"{column}" = {_placeholder(column, len(args))}')
    assignments.append("updated_at = now()")
    if actor_id is not None:
        args.append(actor_id)
        assignments.append(f"updated_by = ${len(args)}")
    sql = f"""
        UPDATE contract
        SET {", ".join(assignments)}
        WHERE contract_id = $1
        RETURNING *
    """
    return Statement(sql=sql, args=tuple(args))


async def list_contracts(*, limit: int, offset: int) -> list[dict[str, Any]]:
    """
    Soonest end date first, undated contracts last, newest first within a date.
    """
    return await db.fetch_all(
        CONTRACT_VIEW
        + """
        ORDER BY COALESCE(c.end_date, DATE '9999-12-31') ASC, c.created_at DESC
        LIMIT $1
        OFFSET $2
        """,
        limit,
        offset,
    )


async def get_contract(contract_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        CONTRACT_VIEW
        + """
        WHERE c.contract_id = $1
        """,
        contract_id,
    )


async def insert_contract(values: dict[str, Any]) -> dict[str, Any]:
    statement = build_insert(values)
    row = await db.fetch_one(statement.sql, *statement.args)
    if row is None:
        raise RuntimeError("Failed to insert contract.")
    return row


async def update_contract(contract_id: int, values: dict[str, Any], *, actor_id: int | None) -> dict[str, Any] | None:
    statement = build_update(contract_id, values, actor_id=actor_id)
    return await db.fetch_one(statement.sql, *statement.args)


async def delete_contract(contract_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM contract
        WHERE contract_id = $1
        RETURNING contract_id
        """,
        contract_id,
    )
    return row is not None
