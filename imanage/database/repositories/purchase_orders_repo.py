from __future__ import annotations
from dataclasses import dataclass, field

from ...constants import (
    DEFAULT_CURRENCY,
    PURCHASE_ORDER_NUMBER_PATTERN,
    PURCHASE_ORDER_STATUSES,
)
from ...errors import ValidationError
from .base import DocumentRepo, ForeignKey, LineItem
from .reference_guard import Dependent


@dataclass
class PurchaseOrder:
    id: str | None = None
    number: str | None = None
    date: str | None = None
    vendor_id: str | None = None
    subtotal: float = 0.0
    tax: float = 0.0
    amount: float = 0.0
    currency: str | None = None
    status: str | None = None
    terms: str | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    items: list[LineItem] = field(default_factory=list)


class PurchaseOrdersRepo(DocumentRepo):
    table = "purchase_orders"
    entity = "Purchase Order"
    record_cls = PurchaseOrder
    item_table = "po_items"
    item_parent_column = "purchase_order_id"
    totals_columns = ("subtotal", "tax", "amount")
    number_pattern = PURCHASE_ORDER_NUMBER_PATTERN
    required = {
        "number": "Purchase order number is required",
        "date": "Purchase order date is required",
    }
    unique = {"number": 'Purchase order number "{value}" already exists'}
    foreign_keys = (
        ForeignKey("vendor_id", "vendors", "Vendor", nested="vendor",
                   required_message="Vendor is required for purchase order"),
    )
    defaults = {"currency": DEFAULT_CURRENCY, "status": "draft"}
    dependents = (
        Dependent("Invoice",
                  "SELECT number FROM invoices WHERE purchase_order_id = ? ORDER BY number"),
        Dependent("Vehicle Transaction",
                  "SELECT COALESCE(NULLIF(description, ''), id) FROM vehicle_transactions "
                  "WHERE purchase_order_id = ? ORDER BY date"),
    )

    def _derive(self, values, data, existing) -> None:
        super()._derive(values, data, existing)
        if values["status"] not in PURCHASE_ORDER_STATUSES:
            raise ValidationError(f'Invalid purchase order status "{values["status"]}"')

    def get_by_vendor(self, vendor_id: str) -> list[PurchaseOrder]:
        rows = self.conn.execute(
            "SELECT * FROM purchase_orders WHERE vendor_id = ? ORDER BY date DESC", (vendor_id,)
        ).fetchall()
        return [self._from_row(r) for r in rows]
