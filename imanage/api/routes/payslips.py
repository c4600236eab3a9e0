from typing import List

from fastapi import APIRouter, Depends

from ...database.repositories import PayslipsRepo
from ..schemas import PayslipIn, PayslipOut
from .crud import crud_router


def _by_month(router: APIRouter, get_repo) -> None:
    @router.get("/month/{month}", response_model=List[PayslipOut])
    def payslips_for_month(month: str, repo=Depends(get_repo)):
        return repo.get_by_month(month)


router = crud_router(
    prefix="/api/payslips",
    tag="payslips",
    repo_cls=PayslipsRepo,
    in_model=PayslipIn,
    out_model=PayslipOut,
    entity="Payslip",
    extra=_by_month,
)
