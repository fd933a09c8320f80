"""
Auth business logic: credential checks and the session lifecycle.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import asyncpg

from core import db
from core.errors import (
    GENERIC_MESSAGE,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InternalError,
    ValidationError,
    store_errors,
)

from . import repository, schemas, security

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"

# Activity refreshes in flight; held so the tasks are not garbage collected early.
_pending_refreshes: set[asyncio.Task] = set()


@dataclass(frozen=True)
class LoginResult:
    session_id: str
    account: schemas.AccountView


def check_account_status(row: dict) -> None:
    """
    Raise AuthorizationError unless the account's status allows it to work.
    """
    status = str(row.get("status") or "").strip().lower()
    if status == "inactive":
        raise AuthorizationError("User account is inactive")
    if status not in schemas.ACCOUNT_STATUSES:
        raise AuthorizationError("User status does not permit login")


async def verify_credentials(conn: asyncpg.Connection, *, username: str, password: str) -> dict:
    row = await repository.find_account_by_credentials(conn, username=username, password=password)
    if row is None:
        raise AuthenticationError(INVALID_CREDENTIALS)
    check_account_status(row)
    return row


async def login(payload: schemas.LoginRequest) -> LoginResult:
    """
    Check credentials and open a session in one transaction.

    Status promotion and session insertion commit together or not at all;
    a rejected login leaves the store untouched.
    """
    username = repository.normalize_username(payload.username or "")
    password = payload.password or ""
    if not username or not password:
        raise ValidationError("username and password are required")

    session_id = security.new_session_id()
    try:
        async with db.transaction() as conn:
            row = await verify_credentials(conn, username=username, password=password)
            user_id = int(row["user_id"])
            updated = await repository.record_login(conn, user_id)
            await repository.insert_session(conn, session_id=session_id, user_id=user_id)
    except DomainError as exc:
        logger.info("login_rejected username=%s reason=%s", username, exc.message)
        raise
    except Exception as exc:
        logger.exception("login_failed username=%s", username)
        raise InternalError(GENERIC_MESSAGE) from exc

    logger.info("login_success user_id=%s", user_id)
    return LoginResult(session_id=session_id, account=schemas.to_account_view(updated or row))


async def logout(session_id: str | None) -> None:
    """
    Delete the session if there is one. Never fails: a store error is logged
    and the caller still clears the cookie and answers 204.
    """
    if not security.is_session_id(session_id):
        return None
    session_id = session_id.strip()
    try:
        deleted = await repository.delete_session(session_id)
    except Exception:
        logger.exception("logout_delete_failed session=%s", session_id[:8])
        return None
    logger.info("logout deleted=%s", deleted)
    return None


async def current_account(session_id: str | None) -> dict | None:
    """
    Resolve a session id to its account row; None when it names no live session.
    """
    if not security.is_session_id(session_id):
        return None
    with store_errors("session_lookup"):
        return await repository.get_account_by_session(session_id.strip())


async def change_password(
    account: schemas.AccountView,
    payload: schemas.ChangePasswordRequest,
    *,
    min_length: int,
) -> None:
    current = payload.current_password or ""
    new = payload.new_password or ""
    if not current or not new:
        raise ValidationError("current_password and new_password are required")
    if len(new) < min_length:
        raise ValidationError(f"New password must be at least {min_length} characters")

    with store_errors("change_password"):
        if not await repository.password_matches(account.user_id, current):
            raise ValidationError("Current password is incorrect")
        await repository.set_password(account.user_id, new)
    logger.info("password_changed user_id=%s", account.user_id)


async def _refresh_activity(session_id: str) -> None:
    """
    Background entrypoint; failures are logged and never reach the request.
    """
    try:
        await repository.touch_session(session_id)
    except Exception:
        logger.exception("session_touch_failed session=%s", session_id[:8])


def schedule_activity_refresh(session_id: str) -> asyncio.Task:
    """
    Fire-and-forget update of the session's last_seen_at.

    The caller does not await the task; the response is not delayed by it.
    """
    task = asyncio.get_running_loop().create_task(_refresh_activity(session_id))
    _pending_refreshes.add(task)
    task.add_done_callback(_pending_refreshes.discard)
    return task


async def drain_activity_refreshes() -> None:
    """
    Wait for refreshes still in flight (used at shutdown, before the pool closes).
    """
    if _pending_refreshes:
        await asyncio.gather(*list(_pending_refreshes), return_exceptions=True)
