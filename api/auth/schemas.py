"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

ACCOUNT_STATUSES = frozenset({"pending", "active", "inactive"})


class LoginRequest(BaseModel):
    # Presence is checked by the service so a missing field is a 400, not a 422.
    username: str | None = None
    password: str | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str | None = None
    new_password: str | None = None


class AccountView(BaseModel):
    user_id: int
    username: str
    name: str | None = None
    status: str
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    password_must_change: bool = False


class LoginResponse(AccountView):
    session_id: str


def to_account_view(row: dict) -> AccountView:
    return AccountView(
        user_id=int(row["user_id"]),
        username=str(row["username"]),
        name=row.get("name"),
        status=str(row.get("status") or ""),
        last_login_at=row.get("last_login_at"),
        created_at=row.get("created_at"),
        password_must_change=bool(row.get("password_must_change")),
    )
