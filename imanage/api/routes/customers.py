from typing import List

from fastapi import APIRouter, Depends, Query

from ...database.repositories import CustomersRepo
from ..schemas import CustomerIn, CustomerOut
from .crud import crud_router


def _search(router: APIRouter, get_repo) -> None:
    @router.get("/search", response_model=List[CustomerOut])
    def search_customers(q: str = Query(..., min_length=1), repo=Depends(get_repo)):
        return repo.search(q)


router = crud_router(
    prefix="/api/customers",
    tag="customers",
    repo_cls=CustomersRepo,
    in_model=CustomerIn,
    out_model=CustomerOut,
    entity="Customer",
    extra=_search,
)
