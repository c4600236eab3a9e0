from __future__ import annotations
from dataclasses import dataclass

from .base import BaseRepo
from .reference_guard import Dependent


@dataclass
class Vehicle:
    id: str | None = None
    vehicle_number: str | None = None
    vehicle_type: str | None = None
    make: str | None = None
    model: str | None = None
    year: int | None = None
    color: str | None = None
    purchase_price: float | None = None
    purchase_date: str | None = None
    current_value: float | None = None
    insurance_cost_monthly: float | None = None
    financing_cost_monthly: float | None = None
    odometer_reading: float | None = None
    last_service_date: str | None = None
    next_service_due: str | None = None
    fuel_type: str | None = None
    status: str | None = None
    registration_expiry: str | None = None
    insurance_expiry: str | None = None
    description: str | None = None
    base_price: float | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class VehiclesRepo(BaseRepo):
    """
    Fleet vehicles. Deleting a vehicle cascades to its vehicle_transactions
    (ON DELETE CASCADE) but is refused while a quote or invoice line item
    still points at it.
    """

    table = "vehicles"
    entity = "Vehicle"
    record_cls = Vehicle
    required = {"vehicle_number": "Vehicle Number is required"}
    unique = {"vehicle_number": 'Vehicle Number "{value}" already exists'}
    defaults = {"status": "active"}
    blank_as_null = (
        "purchase_date", "last_service_date", "next_service_due",
        "registration_expiry", "insurance_expiry",
    )
    order_by = "vehicle_number"
    dependents = (
        Dependent("Quote",
                  "SELECT DISTINCT q.number FROM quote_items qi "
                  "JOIN quotes q ON q.id = qi.quote_id "
                  "WHERE qi.vehicle_type_id = ? ORDER BY q.number"),
        Dependent("Invoice",
                  "SELECT DISTINCT i.number FROM invoice_items ii "
                  "JOIN invoices i ON i.id = ii.invoice_id "
                  "WHERE ii.vehicle_type_id = ? ORDER BY i.number"),
    )

    def get_by_number(self, vehicle_number: str) -> Vehicle | None:
        row = self.conn.execute(
            "SELECT * FROM vehicles WHERE vehicle_number = ?", (vehicle_number.strip(),)
        ).fetchone()
        return None if row is None else self._from_row(row)
