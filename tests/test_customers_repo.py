import pytest

from imanage.database.repositories import CustomersRepo, EmployeesRepo, PayslipsRepo, VendorsRepo
from imanage.errors import ReferenceConflictError, ValidationError


def test_create_assigns_id_and_timestamps(conn):
    c = CustomersRepo(conn).create({"name": "  Gulf Build Co  ", "email": ""})
    assert c.id and len(c.id) == 36
    assert c.name == "Gulf Build Co"
    assert c.email is None
    assert c.created_at.endswith("Z")
    assert c.created_at == c.updated_at


def test_create_keeps_supplied_id(conn):
    c = CustomersRepo(conn).create({"id": "cust-1", "name": "Desert Logistics"})
    assert c.id == "cust-1"


def test_name_is_required(conn):
    with pytest.raises(ValidationError, match="Customer name is required"):
        CustomersRepo(conn).create({"name": "   "})


def test_update_replaces_row_and_missing_returns_none(conn, customer):
    repo = CustomersRepo(conn)
    updated = repo.update(customer.id, {"name": "Al Noor LLC", "phone": "+971 4 000 0000"})
    assert updated.name == "Al Noor LLC"
    assert updated.phone == "+971 4 000 0000"
    # full replace: the email was not resent
    assert updated.email is None
    assert updated.created_at == customer.created_at
    assert repo.update("missing", {"name": "x"}) is None


def test_get_all_and_search(conn):
    repo = CustomersRepo(conn)
    repo.create({"name": "Alpha Trading", "company": "Alpha"})
    repo.create({"name": "Beta Cranes", "email": "beta@example.com"})
    assert {c.name for c in repo.get_all()} == {"Alpha Trading", "Beta Cranes"}
    assert [c.name for c in repo.search("beta@")] == ["Beta Cranes"]
    assert repo.get_by_id("nope") is None


def test_vendor_delete_and_name_required(conn, vendor):
    repo = VendorsRepo(conn)
    with pytest.raises(ValidationError):
        repo.create({"contact_person": "nobody"})
    assert repo.delete(vendor.id) is True


def test_employee_blocked_by_payslip_month(conn, employee):
    PayslipsRepo(conn).create({"employee_id": employee.id, "month": "2025-05", "base_salary": 3500})
    with pytest.raises(ReferenceConflictError) as exc:
        EmployeesRepo(conn).delete(employee.id)
    assert str(exc.value) == "Cannot delete Employee as it is referenced in Payslip 2025-05"
