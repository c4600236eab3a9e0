from __future__ import annotations
from dataclasses import dataclass

from .base import BaseRepo
from .reference_guard import Dependent


@dataclass
class Vendor:
    id: str | None = None
    name: str | None = None
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    bank_details: str | None = None
    payment_terms: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class VendorsRepo(BaseRepo):
    table = "vendors"
    entity = "Vendor"
    record_cls = Vendor
    required = {"name": "Vendor name is required"}
    dependents = (
        Dependent("Purchase Order",
                  "SELECT number FROM purchase_orders WHERE vendor_id = ? ORDER BY number"),
        Dependent("Invoice", "SELECT number FROM invoices WHERE vendor_id = ? ORDER BY number"),
    )
