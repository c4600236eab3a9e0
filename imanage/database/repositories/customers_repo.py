from __future__ import annotations
from dataclasses import dataclass

from .base import BaseRepo
from .reference_guard import Dependent


@dataclass
class Customer:
    id: str | None = None
    name: str | None = None
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class CustomersRepo(BaseRepo):
    table = "customers"
    entity = "Customer"
    record_cls = Customer
    required = {"name": "Customer name is required"}
    blank_as_null = ("company", "email", "phone", "address")
    dependents = (
        Dependent("Quote", "SELECT number FROM quotes WHERE customer_id = ? ORDER BY number"),
        Dependent("Invoice", "SELECT number FROM invoices WHERE customer_id = ? ORDER BY number"),
    )

    def search(self, term: str) -> list[Customer]:
        """LIKE match over name / company / email / phone."""
        pattern = f"%{term.strip()}%"
        rows = self.conn.execute(
            "SELECT * FROM customers "
            "WHERE name LIKE ? OR company LIKE ? OR email LIKE ? OR phone LIKE ? "
            "ORDER BY name",
            (pattern, pattern, pattern, pattern),
        ).fetchall()
        return [self._from_row(r) for r in rows]
