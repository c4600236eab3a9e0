import sqlite3

from fastapi import Depends

from ...database.repositories import DashboardRepo, VehiclesRepo
from ...errors import NotFoundError
from ..deps import get_db
from ..schemas import VehicleIn, VehicleOut, VehicleProfitabilityOut
from .crud import crud_router

router = crud_router(
    prefix="/api/vehicles",
    tag="vehicles",
    repo_cls=VehiclesRepo,
    in_model=VehicleIn,
    out_model=VehicleOut,
    entity="Vehicle",
)


@router.get("/{vehicle_id}/profitability", response_model=VehicleProfitabilityOut)
def vehicle_profitability(vehicle_id: str, conn: sqlite3.Connection = Depends(get_db)):
    result = DashboardRepo(conn).get_profitability_by_vehicle(vehicle_id)
    if result is None:
        raise NotFoundError("Vehicle not found")
    return result
