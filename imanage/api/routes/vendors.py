from ...database.repositories import VendorsRepo
from ..schemas import VendorIn, VendorOut
from .crud import crud_router

router = crud_router(
    prefix="/api/vendors",
    tag="vendors",
    repo_cls=VendorsRepo,
    in_model=VendorIn,
    out_model=VendorOut,
    entity="Vendor",
)
