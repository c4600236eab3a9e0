import sqlite3

from fastapi import APIRouter, Depends

from ...database.repositories import DashboardRepo
from ..deps import get_db
from ..schemas import DashboardMetricsOut

router = APIRouter(prefix="/api/vehicle-finances", tags=["vehicle-finances"])


@router.get("/dashboard", response_model=DashboardMetricsOut)
def dashboard_metrics(conn: sqlite3.Connection = Depends(get_db)):
    return DashboardRepo(conn).get_dashboard_metrics()
