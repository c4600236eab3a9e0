# imanage/database/__init__.py
from __future__ import annotations

from pathlib import Path
import sqlite3

from ..errors import UnavailableError
from ..utils.loggers import get_logger
from . import schema as schema_module
from .seeders.default_data import seed as seed_default_data

_log = get_logger(__name__)

MEMORY = ":memory:"


def connect(db_path: Path | str, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """
    Open `db_path` with:
      - foreign_keys ON
      - WAL mode (file databases only)
      - row_factory = sqlite3.Row (so rows behave like dicts and tuples)
    Does not touch the schema. Raises UnavailableError if the file cannot be opened.
    """
    try:
        if str(db_path) != MEMORY:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path), check_same_thread=check_same_thread)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        if str(db_path) != MEMORY:
            conn.execute("PRAGMA journal_mode = WAL;")
    except (OSError, sqlite3.Error) as e:
        _log.error("Could not open database at %s: %s", db_path, e)
        raise UnavailableError() from e
    return conn


def get_connection(
    db_path: Path | str | None = None,
    *,
    check_same_thread: bool = True,
) -> sqlite3.Connection:
    """
    connect() plus schema & seed data, applied idempotently.

    The caller owns the handle and passes it to the repositories; there is no
    module-level connection. Defaults to config.DB_PATH.
    """
    if db_path is None:
        from ..config import DB_PATH
        db_path = DB_PATH

    conn = connect(db_path, check_same_thread=check_same_thread)
    try:
        # Always apply the schema (idempotent: CREATE IF NOT EXISTS + additive columns)
        schema_module.init_schema(conn)
        # Seeders should be safe to run repeatedly (idempotent).
        seed_default_data(conn)
    except sqlite3.Error as e:
        conn.close()
        _log.error("Could not initialise database at %s: %s", db_path, e)
        raise UnavailableError() from e
    return conn


__all__ = [
    "MEMORY",
    "connect",
    "get_connection",
]
