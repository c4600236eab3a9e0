# imanage/errors.py
"""
Domain errors shared by the repositories and the HTTP layer.

Every error carries an ErrorKind so callers can branch on the kind instead of
parsing message text. Messages are user-facing and surfaced as-is.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Reference:
    """One dependent document blocking a delete, e.g. Reference("Quote", "Q-001")."""
    type: str
    number: str

    def __str__(self) -> str:
        return f"{self.type} {self.number}"


class DomainError(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND


class ValidationError(DomainError):
    kind = ErrorKind.VALIDATION


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT


class ReferenceConflictError(ConflictError):
    """Delete refused because other documents still point at the row."""

    def __init__(self, message: str, entity: str, references: list[Reference]):
        super().__init__(message)
        self.entity = entity
        self.references = list(references)


class UnavailableError(DomainError):
    kind = ErrorKind.UNAVAILABLE

    def __init__(self, message: str = "Database is not available"):
        super().__init__(message)


__all__ = [
    "ErrorKind",
    "Reference",
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ReferenceConflictError",
    "UnavailableError",
]
