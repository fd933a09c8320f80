"""
Auth security helpers.
"""

from __future__ import annotations

import uuid

import bcrypt


class AuthSecurityError(RuntimeError):
    pass


def new_session_id() -> str:
    # uuid4 draws from os.urandom.
    return str(uuid.uuid4())


def is_session_id(value: str | None) -> bool:
    """
    Session ids are UUIDs; anything else cannot name a stored session.
    """
    raw = (value or "").strip()
    if not raw:
        return False
    try:
        uuid.UUID(raw)
    except ValueError:
        return False
    return True


def hash_password(plain_password: str) -> str:
    """
    Hash a password for direct insertion into `user_account.password_hash`.

    pgcrypto's crypt() only understands the `$2a$` bcrypt variant, so the salt
    is generated with that prefix.
    """
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt(prefix=b"2a")).decode("utf-8")

