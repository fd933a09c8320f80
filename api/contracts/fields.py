"""
Contract field whitelist and payload sanitizing.

Only the fields listed here ever reach SQL as column names. Values are coerced
by field type. Both create and patch payloads keep every whitelisted field whose
key is present, so an explicit null is written as NULL; a missing key is never
touched.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

TEXT = "text"
INTEGER = "integer"
BOOLEAN = "boolean"
DATE = "date"

# Name inputs: resolved to the matching *_id, never stored themselves.
NAME_LOOKUPS = {
    "department": "department_id",
    "status": "status_id",
}

FIELDS: dict[str, str] = {
    "title": TEXT,
    "counterparty_name": TEXT,
    "counterparty_contact": TEXT,
    "counterparty_email": TEXT,
    "internal_owner": TEXT,
    "department": TEXT,
    "department_id": INTEGER,
    "contract_type": TEXT,
    "status": TEXT,
    "status_id": INTEGER,
    "signed_date": DATE,
    "effective_date": DATE,
    "start_date": DATE,
    "end_date": DATE,
    "auto_renew": BOOLEAN,
    "renewal_term_months": INTEGER,
    "termination_notice_days": INTEGER,
    "termination_notice_deadline": DATE,
    "notes": TEXT,
    "file_name": TEXT,
}

# Columns the store fills from the acting identity.
AUDIT_COLUMNS = {"created_by": INTEGER, "updated_by": INTEGER}

TRUE_WORDS = frozenset({"true", "1", "yes", "y", "on"})
FALSE_WORDS = frozenset({"false", "0", "no", "n", "off"})


def coerce_boolean(value: Any) -> bool | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    word = str(value).strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    return None


def coerce_integer(value: Any) -> int | None:
    if value is None or isinstance(value, (list, dict)):
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return math.trunc(number)


def coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        value = "true" if value else "false"
    elif isinstance(value, (int, float)):
        value = str(value)
    elif not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


_COERCERS = {
    TEXT: coerce_text,
    DATE: coerce_text,
    INTEGER: coerce_integer,
    BOOLEAN: coerce_boolean,
}


def coerce(field: str, value: Any) -> Any:
    return _COERCERS[FIELDS[field]](value)


def sanitize_create(payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Whitelisted fields whose key is present; missing keys are left out so the
    column keeps its default.
    """
    return {field: coerce(field, payload[field]) for field in FIELDS if field in payload}


def sanitize_patch(payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Whitelisted fields whose key is present, including explicit nulls.
    """
    return sanitize_create(payload)
