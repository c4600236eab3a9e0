from ...database.repositories import EmployeesRepo
from ..schemas import EmployeeIn, EmployeeOut
from .crud import crud_router

router = crud_router(
    prefix="/api/employees",
    tag="employees",
    repo_cls=EmployeesRepo,
    in_model=EmployeeIn,
    out_model=EmployeeOut,
    entity="Employee",
)
