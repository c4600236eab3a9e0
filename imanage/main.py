"""Run the HTTP API: `python -m imanage.main [--host H] [--port P] [--db PATH]`."""
import argparse

import uvicorn

from .api import create_app
from .config import API_HOST, API_PORT, DB_PATH
from .utils.loggers import get_logger

_log = get_logger(__name__)


def main() -> None:
    ap = argparse.ArgumentParser(description="Serve the iManage HTTP API.")
    ap.add_argument("--host", default=API_HOST)
    ap.add_argument("--port", type=int, default=API_PORT)
    ap.add_argument("--db", default=str(DB_PATH), help="SQLite database file")
    args = ap.parse_args()

    _log.info("Serving on http://%s:%s (database %s)", args.host, args.port, args.db)
    uvicorn.run(create_app(args.db), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
