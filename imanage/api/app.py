"""
FastAPI application factory.

The lifespan opens the database once to apply schema and seed data, then
closes it; each request gets its own connection through deps.get_db. If the
database cannot be prepared the app still starts, /api/health reports it, and
every data route answers 503.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import CORS_ORIGINS, DB_PATH, UPLOADS_PATH
from ..constants import UPLOADS_DIR
from ..database import get_connection
from ..errors import UnavailableError
from ..utils.loggers import get_logger
from .errors import register_exception_handlers
from .routes import ROUTERS

_log = get_logger(__name__)


def create_app(db_path: Optional[Union[str, Path]] = None,
               uploads_dir: Optional[Union[str, Path]] = None) -> FastAPI:
    resolved = db_path if db_path is not None else DB_PATH
    if uploads_dir is None:
        # uploads sit beside the database they belong to
        uploads_dir = UPLOADS_PATH if db_path is None else Path(db_path).parent / UPLOADS_DIR

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.db_path = resolved
        app.state.uploads_dir = Path(uploads_dir)
        try:
            conn = get_connection(resolved)
        except UnavailableError:
            _log.error("Starting without a database (%s)", resolved)
            app.state.db_ready = False
        else:
            conn.close()
            app.state.db_ready = True
            _log.info("Database ready at %s", resolved)
        yield

    app = FastAPI(title="iManage API", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)
    return app
