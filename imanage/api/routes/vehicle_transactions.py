from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...database.repositories import VehicleTransactionsRepo
from ..schemas import VehicleTransactionIn, VehicleTransactionOut
from .crud import crud_router


def _by_vehicle(router: APIRouter, get_repo) -> None:
    @router.get("/vehicle/{vehicle_id}", response_model=List[VehicleTransactionOut])
    def transactions_for_vehicle(
        vehicle_id: str,
        month: Optional[str] = Query(default=None, description="YYYY-MM"),
        repo=Depends(get_repo),
    ):
        if month:
            return repo.get_by_vehicle_id_and_month(vehicle_id, month)
        return repo.get_by_vehicle_id(vehicle_id)


router = crud_router(
    prefix="/api/vehicle-transactions",
    tag="vehicle-transactions",
    repo_cls=VehicleTransactionsRepo,
    in_model=VehicleTransactionIn,
    out_model=VehicleTransactionOut,
    entity="Transaction",
    extra=_by_vehicle,
)
