"""
Domain error taxonomy.

Every business-rule or input violation is raised as a ``DomainError``
subclass tagged with a closed ``ErrorKind``.  The API layer maps kinds to
HTTP status codes directly; messages are for humans only and are never
inspected by code.
"""

from __future__ import annotations

import enum
from typing import Iterable, Optional


class ErrorKind(str, enum.Enum):
    MISSING_FIELD = "missing_field"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_DATE_RANGE = "invalid_date_range"
    INVALID_INPUT = "invalid_input"
    FORBIDDEN = "forbidden"
    DUPLICATE_KEY = "duplicate_key"
    UNAUTHENTICATED = "unauthenticated"


class DomainError(Exception):
    """Base class for all tagged domain errors."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingField(DomainError):
    kind = ErrorKind.MISSING_FIELD

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class NotFound(DomainError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, message: Optional[str] = None) -> None:
        self.entity = entity
        super().__init__(message or f"{entity.capitalize()} not found")


class Conflict(DomainError):
    kind = ErrorKind.CONFLICT


class InvalidDateRange(DomainError):
    kind = ErrorKind.INVALID_DATE_RANGE

    def __init__(
        self, message: str = "rent_end_date must be after rent_start_date"
    ) -> None:
        super().__init__(message)


class InvalidInput(DomainError):
    kind = ErrorKind.INVALID_INPUT


class Forbidden(DomainError):
    kind = ErrorKind.FORBIDDEN


class DuplicateKey(DomainError):
    kind = ErrorKind.DUPLICATE_KEY

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message or f"A record with this {field} already exists")


class Unauthenticated(DomainError):
    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "You are not authorized!") -> None:
        super().__init__(message)
