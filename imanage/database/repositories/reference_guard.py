"""
Reference-integrity guard.

Before a parent row is deleted the guard queries every table known to hold a
foreign key to it and refuses the delete with a readable list of the
referencing documents. If SQLite still reports a FOREIGN KEY failure on the
delete itself, the references are queried again so the caller gets the same
structured error instead of the raw database message.
"""
from __future__ import annotations

from dataclasses import dataclass
import sqlite3
from typing import Callable, Iterable, Sequence, TypeVar

from ...errors import ConflictError, Reference, ReferenceConflictError
from ...utils.loggers import get_logger

_log = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Dependent:
    """
    A table pointing at the guarded entity.

    `sql` takes the parent id as its only parameter and returns one row per
    referencing document; the first column is the label shown to the user
    (usually the document number).
    """
    type: str
    sql: str


def format_reference_error(entity: str, references: Iterable[Reference]) -> str:
    refs = list(references)
    if not refs:
        return ""
    if len(refs) == 1:
        return f"Cannot delete {entity} as it is referenced in {refs[0]}"
    lines = "\n".join(f"- {r}" for r in refs)
    return f"Cannot delete {entity} as it is referenced in:\n{lines}"


def _is_foreign_key_failure(exc: sqlite3.IntegrityError) -> bool:
    return "FOREIGN KEY" in str(exc).upper()


class ReferenceGuard:
    def __init__(self, conn: sqlite3.Connection, entity: str, dependents: Sequence[Dependent]):
        self.conn = conn
        self.entity = entity
        self.dependents = tuple(dependents)

    def find_references(self, record_id: str) -> list[Reference]:
        refs: list[Reference] = []
        for dep in self.dependents:
            for row in self.conn.execute(dep.sql, (record_id,)).fetchall():
                label = row[0]
                refs.append(Reference(dep.type, "" if label is None else str(label)))
        return refs

    def ensure_deletable(self, record_id: str) -> None:
        refs = self.find_references(record_id)
        if refs:
            raise ReferenceConflictError(
                format_reference_error(self.entity, refs), self.entity, refs
            )

    def delete(self, record_id: str, action: Callable[[], T]) -> T:
        """
        check -> act -> re-check on conflict.

        `action` performs the actual delete (and rolls back its own
        transaction on failure).
        """
        self.ensure_deletable(record_id)
        try:
            return action()
        except sqlite3.IntegrityError as e:
            if not _is_foreign_key_failure(e):
                raise
            _log.warning("Delete of %s %s hit a foreign key failure; re-checking references",
                         self.entity, record_id)
            refs = self.find_references(record_id)
            if refs:
                raise ReferenceConflictError(
                    format_reference_error(self.entity, refs), self.entity, refs
                ) from e
            raise ConflictError(
                f"Cannot delete {self.entity} as it is referenced in other records"
            ) from e
