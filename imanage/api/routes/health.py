from fastapi import APIRouter, Request

from ... import __version__
from ..schemas import HealthOut

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(request: Request):
    ready = bool(getattr(request.app.state, "db_ready", False))
    return HealthOut(status="ok" if ready else "degraded", database=ready, version=__version__)
