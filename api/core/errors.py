"""
Domain errors and the translation step at the store boundary.

Every failure that reaches a client is one of the `DomainError` kinds below;
`main.py` renders them as `{"error": message}` with the matching status code.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import asyncpg

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = 400


class AuthenticationError(DomainError):
    status_code = 401


class AuthorizationError(DomainError):
    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    status_code = 409


class InternalError(DomainError):
    status_code = 500


GENERIC_MESSAGE = "Internal server error"
INVALID_DATE_MESSAGE = "Invalid date format in request"

_INVALID_DATE_ERRORS = (
    asyncpg.exceptions.InvalidDatetimeFormatError,
    asyncpg.exceptions.DatetimeFieldOverflowError,
)


def translate_store_error(exc: BaseException, *, conflict_message: str = "Conflict") -> DomainError:
    """
    Map an exception raised while talking to the store onto a domain error.

    Domain errors pass through untouched. Known Postgres error codes become
    their domain kind; anything else is an InternalError with a generic message.
    """
    if isinstance(exc, DomainError):
        return exc
    if isinstance(exc, asyncpg.exceptions.UniqueViolationError):
        return ConflictError(conflict_message)
    if isinstance(exc, _INVALID_DATE_ERRORS):
        return ValidationError(INVALID_DATE_MESSAGE)
    return InternalError(GENERIC_MESSAGE)


@contextmanager
def store_errors(event: str, *, conflict_message: str = "Conflict") -> Iterator[None]:
    """
    Run a block of store calls, re-raising failures as domain errors.

    Unexpected failures are logged with their traceback under `event`; the
    client only ever sees the generic message.
    """
    try:
        yield
    except DomainError:
        raise
    except Exception as exc:
        err = translate_store_error(exc, conflict_message=conflict_message)
        if isinstance(err, InternalError):
            logger.exception("store_error event=%s", event)
        else:
            logger.info("store_rejected event=%s kind=%s", event, type(err).__name__)
        raise err from exc
