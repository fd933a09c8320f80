"""
Parsing of path and query parameters shared by the CRUD routers.
"""

from __future__ import annotations

import math
import re

from .errors import ValidationError

_INTEGER = re.compile(r"^[+-]?\d+$")

# Postgres bigint range; larger ids cannot exist and would fail to encode.
_BIGINT_MIN = -(2**63)
_BIGINT_MAX = 2**63 - 1

DEFAULT_LIMIT = 200
MAX_LIMIT = 1000


def parse_id(raw: str | None, message: str) -> int:
    """
    Parse a numeric path id, failing with a 400 before any store call.
    """
    text = (raw or "").strip()
    if not _INTEGER.match(text):
        raise ValidationError(message)
    value = int(text)
    if not _BIGINT_MIN <= value <= _BIGINT_MAX:
        raise ValidationError(message)
    return value


def _as_int(raw: str | None) -> int | None:
    text = (raw or "").strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return math.trunc(number)


def clamp_pagination(limit: str | None, offset: str | None) -> tuple[int, int]:
    """
    Missing or unparsable values take the defaults; parsed values are clamped
    to 1..1000 for limit and >= 0 for offset.
    """
    parsed_limit = _as_int(limit)
    parsed_offset = _as_int(offset)
    limit_value = DEFAULT_LIMIT if parsed_limit is None else min(max(parsed_limit, 1), MAX_LIMIT)
    offset_value = 0 if parsed_offset is None else max(parsed_offset, 0)
    return limit_value, offset_value
