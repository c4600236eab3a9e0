"""
database/backup.py

Consistent snapshots of the live database into the backups directory.

Uses the SQLite Online Backup API (Connection.backup), which copies a
consistent image even in WAL mode and never touches the -wal/-shm files.
The snapshot is verified with PRAGMA quick_check before it is reported.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
import sqlite3
from typing import List, Optional

from ..errors import UnavailableError
from ..utils.loggers import get_logger

_log = get_logger(__name__)

__all__ = ["backup_database", "list_backups", "quick_check"]


def quick_check(db_path: Path | str) -> bool:
    """Run PRAGMA quick_check; returns True iff result is exactly 'ok'."""
    p = Path(db_path)
    if not p.is_file():
        return False
    con = sqlite3.connect(f"file:{p}?mode=ro", uri=True)
    try:
        row = con.execute("PRAGMA quick_check;").fetchone()
    finally:
        con.close()
    return bool(row and isinstance(row[0], str) and row[0].lower() == "ok")


def backup_database(conn: sqlite3.Connection, dest_dir: Optional[Path | str] = None) -> Path:
    """
    Snapshot `conn` into `dest_dir` (default: config.BACKUP_PATH) as
    imanage-YYYYMMDD-HHMMSS.db and return the new file's path.
    """
    if dest_dir is None:
        from ..config import BACKUP_PATH
        dest_dir = BACKUP_PATH
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / f"imanage-{datetime.now():%Y%m%d-%H%M%S-%f}.db"

    target = sqlite3.connect(dest)
    try:
        conn.backup(target)
    except sqlite3.Error as e:
        _log.error("Backup to %s failed: %s", dest, e)
        raise UnavailableError(f"Backup failed: {e}") from e
    finally:
        target.close()

    if not quick_check(dest):
        raise UnavailableError(f"Backup verification failed for {dest.name}")
    _log.info("Backup written to %s", dest)
    return dest


def list_backups(dest_dir: Optional[Path | str] = None) -> List[Path]:
    """Existing snapshots, newest first."""
    if dest_dir is None:
        from ..config import BACKUP_PATH
        dest_dir = BACKUP_PATH
    return sorted(Path(dest_dir).glob("imanage-*.db"), reverse=True)
