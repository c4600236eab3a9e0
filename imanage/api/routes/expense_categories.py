from ...database.repositories import ExpenseCategoriesRepo
from ..schemas import ExpenseCategoryIn, ExpenseCategoryOut
from .crud import crud_router

router = crud_router(
    prefix="/api/expense-categories",
    tag="expense-categories",
    repo_cls=ExpenseCategoriesRepo,
    in_model=ExpenseCategoryIn,
    out_model=ExpenseCategoryOut,
    entity="Expense category",
)
