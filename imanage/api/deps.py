import sqlite3
from typing import Callable, Iterator, Type

from fastapi import Depends, Request

from ..database import connect
from ..errors import UnavailableError
from ..utils.file_storage import FileStorage


def get_db(request: Request) -> Iterator[sqlite3.Connection]:
    """
    One connection per request, closed afterwards.

    The schema is prepared once at startup (see app.lifespan); if that failed
    every request is answered with the "Database is not available" error.
    """
    if not getattr(request.app.state, "db_ready", False):
        raise UnavailableError()
    # FastAPI may run the dependency and the endpoint on different worker threads
    conn = connect(request.app.state.db_path, check_same_thread=False)
    try:
        yield conn
    finally:
        conn.close()


def repo_dependency(repo_cls: Type) -> Callable:
    """Dependency building `repo_cls` around the request's connection."""
    def _provide(conn: sqlite3.Connection = Depends(get_db)):
        return repo_cls(conn)

    _provide.__name__ = f"get_{repo_cls.__name__}"
    return _provide


def get_storage(request: Request) -> FileStorage:
    """Upload storage rooted at the app's uploads directory."""
    return FileStorage(request.app.state.uploads_dir)
