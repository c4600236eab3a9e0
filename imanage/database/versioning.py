"""Single-row `schema_version` bookkeeping used by init_schema()."""
import sqlite3

from ..constants import SCHEMA_VERSION, TABLE_SCHEMA_VERSION

_DDL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_SCHEMA_VERSION}(
    id          INTEGER PRIMARY KEY CHECK (id = 1),
    version     TEXT NOT NULL,
    applied_at  TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""


def ensure_version_table(conn: sqlite3.Connection) -> None:
    conn.execute(_DDL)


def get_current_version(conn: sqlite3.Connection) -> str | None:
    ensure_version_table(conn)
    row = conn.execute(f"SELECT version FROM {TABLE_SCHEMA_VERSION} WHERE id = 1").fetchone()
    return None if row is None else row[0]


def set_current_version(conn: sqlite3.Connection, version: str = SCHEMA_VERSION) -> None:
    """Record `version` and stamp applied_at. No commit here; caller controls transaction."""
    ensure_version_table(conn)
    conn.execute(
        f"INSERT INTO {TABLE_SCHEMA_VERSION}(id, version) VALUES (1, ?) "
        "ON CONFLICT(id) DO UPDATE SET version = excluded.version, "
        "applied_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')",
        (version,),
    )


def is_current(conn: sqlite3.Connection) -> bool:
    return get_current_version(conn) == SCHEMA_VERSION
