import pytest

from imanage.database.module_cleanup import MODULES, delete_modules, get_module, record_counts
from imanage.database.repositories import (
    CustomersRepo,
    ExpenseCategoriesRepo,
    QuotesRepo,
)
from imanage.errors import ConflictError, ValidationError


def test_module_catalogue():
    ids = [m.id for m in MODULES]
    assert len(ids) == len(set(ids)) == 10
    with pytest.raises(ValidationError, match='Unknown module "widgets"'):
        get_module("widgets")


def test_delete_quotes_then_customers(conn, customer, line):
    QuotesRepo(conn).create({"number": "Q-1", "date": "2025-06-01",
                             "customer_id": customer.id, "items": [line(), line()]})
    result = delete_modules(conn, ["quotes", "customers"])
    assert result["quotes"] == {"quotes": 1, "quote_items": 2}
    assert result["customers"] == {"customers": 1}
    assert CustomersRepo(conn).get_all() == []


def test_dependent_module_blocks_and_rolls_back(conn, customer):
    QuotesRepo(conn).create({"number": "Q-1", "date": "2025-06-01", "customer_id": customer.id})
    with pytest.raises(ConflictError, match="Cannot delete customers: there are dependent records"):
        delete_modules(conn, ["payslips", "customers"])
    assert len(CustomersRepo(conn).get_all()) == 1


def test_only_custom_expense_categories_are_deleted(conn):
    ExpenseCategoriesRepo(conn).create({"name": "Tolls"})
    module = get_module("expense_categories")
    assert record_counts(conn, module) == {"expense_categories": 1}
    assert delete_modules(conn, ["expense_categories"]) == {
        "expense_categories": {"expense_categories": 1}
    }
    assert len(ExpenseCategoriesRepo(conn).get_all()) == 7
