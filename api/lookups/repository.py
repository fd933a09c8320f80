"""
Lookup table persistence (raw SQL).
"""

from __future__ import annotations

from core import db

from .tables import LookupTable


def _columns(table: LookupTable) -> str:
    return f"{table.id_column}, name"


async def list_rows(table: LookupTable) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_columns(table)}
        FROM {table.table}
        ORDER BY lower(name) ASC
        """
    )


async def get_row(table: LookupTable, row_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_columns(table)}
        FROM {table.table}
        WHERE {table.id_column} = $1
        """,
        row_id,
    )


async def find_id_by_name(table: LookupTable, name: str) -> int | None:
    """
    Case-insensitive exact lookup of a row id by name.
    """
    row = await db.fetch_one(
        f"""
        SELECT {table.id_column}
        FROM {table.table}
        WHERE lower(name) = lower($1)
        LIMIT 1
        """,
        name,
    )
    if row is None:
        return None
    return int(row[table.id_column])


async def insert_row(table: LookupTable, name: str) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO {table.table} (name)
        VALUES ($1)
        RETURNING {_columns(table)}
        """,
        name,
    )
    if row is None:
        raise RuntimeError(f"Failed to insert {table.label}.")
    return row


async def rename_row(table: LookupTable, row_id: int, name: str) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE {table.table}
        SET name = $1
        WHERE {table.id_column} = $2
        RETURNING {_columns(table)}
        """,
        name,
        row_id,
    )


async def delete_row(table: LookupTable, row_id: int) -> bool:
    row = await db.fetch_one(
        f"""
        DELETE FROM {table.table}
        WHERE {table.id_column} = $1
        RETURNING {table.id_column}
        """,
        row_id,
    )
    return row is not None
