"""
Auth persistence helpers.

Passwords never leave the store: comparison and hashing go through pgcrypto
`crypt()` so the stored hash format is the store's business.
"""

from __future__ import annotations

import asyncpg

from core import db

ACCOUNT_COLUMNS = "user_id, username, name, status, created_at, last_login_at, password_must_change"


def normalize_username(username: str) -> str:
    return (username or "").strip().lower()


async def find_account_by_credentials(
    conn: asyncpg.Connection,
    *,
    username: str,
    password: str,
) -> dict | None:
    """
    Return the account whose username and password both match, else None.

    A missing account and a wrong password are deliberately indistinguishable.
    """
    return await db.fetch_one(
        f"""
        SELECT {ACCOUNT_COLUMNS}
        FROM user_account
        WHERE username = $1
          AND password_hash = crypt($2, password_hash)
        LIMIT 1
        """,
        normalize_username(username),
        password,
        conn=conn,
    )


async def record_login(conn: asyncpg.Connection, user_id: int) -> dict | None:
    """
    Promote a pending account to active and stamp last_login_at.
    """
    return await db.fetch_one(
        f"""
        UPDATE user_account
        SET status = CASE WHEN status = 'pending' THEN 'active' ELSE status END,
            last_login_at = now()
        WHERE user_id = $1
        RETURNING {ACCOUNT_COLUMNS}
        """,
        user_id,
        conn=conn,
    )


async def insert_session(conn: asyncpg.Connection, *, session_id: str, user_id: int) -> None:
    await db.execute(
        """
        INSERT INTO user_session (session_id, user_id)
        VALUES ($1, $2)
        """,
        session_id,
        user_id,
        conn=conn,
    )


async def get_account_by_session(session_id: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT ua.user_id, ua.username, ua.name, ua.status, ua.created_at,
               ua.last_login_at, ua.password_must_change
        FROM user_session s
        JOIN user_account ua ON ua.user_id = s.user_id
        WHERE s.session_id = $1
        LIMIT 1
        """,
        session_id,
    )


async def delete_session(session_id: str) -> bool:
    status = await db.execute(
        """
        DELETE FROM user_session
        WHERE session_id = $1
        """,
        session_id,
    )
    return db.rows_affected(status) > 0


async def touch_session(session_id: str) -> None:
    await db.execute(
        """
        UPDATE user_session
        SET last_seen_at = now()
        WHERE session_id = $1
        """,
        session_id,
    )


async def purge_stale_sessions(max_age_days: int) -> int:
    """
    Delete sessions not seen (or, if never seen, not created) within the horizon.
    """
    status = await db.execute(
        """
        DELETE FROM user_session
        WHERE COALESCE(last_seen_at, created_at) < now() - make_interval(days => $1)
        """,
        max_age_days,
    )
    return db.rows_affected(status)


async def password_matches(user_id: int, password: str) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM user_account
        WHERE user_id = $1
          AND password_hash = crypt($2, password_hash)
        """,
        user_id,
        password,
    )
    return row is not None


async def set_password(user_id: int, new_password: str) -> None:
    await db.execute(
        """
        UPDATE user_account
        SET password_hash = crypt($1, gen_salt('bf')),
            password_must_change = FALSE
        WHERE user_id = $2
        """,
        new_password,
        user_id,
    )


async def create_account(
    *,
    username: str,
    name: str | None,
    password_hash: str,
    status: str = "pending",
    must_change_password: bool = True,
) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO user_account (username, name, password_hash, status, password_must_change)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {ACCOUNT_COLUMNS}
        """,
        normalize_username(username),
        name,
        password_hash,
        status,
        must_change_password,
    )
    if row is None:
        raise RuntimeError("Failed to create account.")
    return row
