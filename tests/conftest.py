# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - Every test gets its own SQLite file under tmp_path (schema + seed applied)
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON (via get_connection)
# - Vehicle transactions are validated against a fixed "today" (TODAY)
# - Provide handy parent rows (customer, vendor, employee, vehicle)
# ---------------------------------------------------------------------

from __future__ import annotations

from datetime import date

import pytest

from imanage.database import get_connection
from imanage.database.repositories import (
    CustomersRepo,
    EmployeesRepo,
    VehiclesRepo,
    VehicleTransactionsRepo,
    VendorsRepo,
)

TODAY = date(2025, 6, 15)


# ---------- Per-test database ----------
@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "imanage-test.db"


@pytest.fixture()
def conn(db_path):
    """Fresh database with schema and default data; closed after the test."""
    con = get_connection(db_path)
    try:
        yield con
    finally:
        con.close()


# ---------- Parent rows ----------
@pytest.fixture()
def customer(conn):
    return CustomersRepo(conn).create({"name": "Al Noor Contracting", "email": "ops@alnoor.example"})


@pytest.fixture()
def vendor(conn):
    return VendorsRepo(conn).create({"name": "Emirates Auto Parts", "contact_person": "Rashid"})


@pytest.fixture()
def employee(conn):
    return EmployeesRepo(conn).create({"name": "Imran Khan", "employee_id": "EMP-001",
                                       "payment_type": "salary", "salary": 3500})


@pytest.fixture()
def vehicle(conn):
    return VehiclesRepo(conn).create({"vehicle_number": "DXB-10231", "vehicle_type": "Truck",
                                      "base_price": 950})


@pytest.fixture()
def transactions(conn):
    """Vehicle transactions repo pinned to TODAY."""
    return VehicleTransactionsRepo(conn, today=lambda: TODAY)


# ---------- Line items ----------
def _line(description="Truck rental", quantity=1, unit_price=100, tax_percent=5, **extra):
    item = {"description": description, "quantity": quantity,
            "unit_price": unit_price, "tax_percent": tax_percent}
    item.update(extra)
    return item


@pytest.fixture()
def line():
    """Factory for line-item payloads: line(quantity=2, unit_price=50, ...)."""
    return _line


@pytest.fixture()
def today():
    return TODAY
