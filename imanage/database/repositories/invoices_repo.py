from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping

from ...constants import INVOICE_NUMBER_PATTERN, INVOICE_STATUSES
from ...errors import ValidationError
from ...utils.calculations import compute_totals
from ...utils.validators import try_parse_float
from .base import ITEM_COLUMNS, DocumentRepo, ForeignKey, LineItem
from .reference_guard import Dependent


@dataclass
class Invoice:
    id: str | None = None
    number: str | None = None
    date: str | None = None
    due_date: str | None = None
    customer_id: str | None = None
    vendor_id: str | None = None
    purchase_order_id: str | None = None
    quote_id: str | None = None
    subtotal: float = 0.0
    tax: float = 0.0
    tax_override: float | None = None
    total: float = 0.0
    amount_received: float = 0.0
    status: str | None = None
    terms: str | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    items: list[LineItem] = field(default_factory=list)


def _item_signature(items) -> list[tuple]:
    """Comparable view of an item list (derived columns only, ids ignored)."""
    return [
        tuple(line.get(c) for c in ITEM_COLUMNS)
        for line in compute_totals(items).lines
    ]


class InvoicesRepo(DocumentRepo):
    """
    Invoices carry an optional manual tax override.

    Policy: `tax` is the items' tax unless `tax_override` is set. An override is
    set only by an explicit `tax_override` value that differs from the stored
    one. Any change to the item list (an update whose items differ, or
    add_item / update_item / remove_item) clears the override unless the same
    payload sets a new one.
    """

    table = "invoices"
    entity = "Invoice"
    record_cls = Invoice
    item_table = "invoice_items"
    item_parent_column = "invoice_id"
    totals_columns = ("subtotal", "tax", "total")
    number_pattern = INVOICE_NUMBER_PATTERN
    starting_number_setting = "invoice_starting_number"
    required = {"number": "Invoice number is required", "date": "Invoice date is required"}
    unique = {"number": 'Invoice number "{value}" already exists'}
    foreign_keys = (
        ForeignKey("customer_id", "customers", "Customer", nested="customer",
                   required_message="Customer is required for invoice"),
        ForeignKey("vendor_id", "vendors", "Vendor", nested="vendor"),
        ForeignKey("purchase_order_id", "purchase_orders", "Purchase Order",
                   nested="purchase_order"),
        ForeignKey("quote_id", "quotes", "Quote", nested="quote"),
    )
    defaults = {"status": "draft", "amount_received": 0.0}
    blank_as_null = ("due_date",)
    dependents = (
        Dependent("Vehicle Transaction",
                  "SELECT COALESCE(NULLIF(description, ''), id) FROM vehicle_transactions "
                  "WHERE invoice_id = ? ORDER BY date"),
    )

    def _derive(self, values: dict, data: Mapping[str, Any], existing) -> None:
        super()._derive(values, data, existing)
        if values["status"] not in INVOICE_STATUSES:
            raise ValidationError(f'Invalid invoice status "{values["status"]}"')

        override = self._resolve_override(data, existing)
        values["tax_override"] = override
        if override is not None:
            values["tax"] = override
            values["total"] = values["subtotal"] + override

    def _resolve_override(self, data: Mapping[str, Any], existing):
        requested = None
        if data.get("tax_override") is not None:
            ok, requested = try_parse_float(data["tax_override"])
            if not ok or requested < 0:
                raise ValidationError("Tax override must be a non-negative number")

        if existing is None:
            return requested

        stored = existing.tax_override
        if "tax_override" in data and requested != stored:
            return requested
        items_changed = _item_signature(self._incoming_items(data)) != _item_signature(
            [vars(it) for it in existing.items]
        )
        return None if items_changed else stored

    def _save_items(self, record, items: list):
        payload = self._payload(record)
        payload["items"] = items
        payload.pop("tax_override", None)
        return self.update(record.id, payload)

    def get_by_customer(self, customer_id: str) -> list[Invoice]:
        rows = self.conn.execute(
            "SELECT * FROM invoices WHERE customer_id = ? ORDER BY date DESC", (customer_id,)
        ).fetchall()
        return [self._from_row(r) for r in rows]

    def outstanding_balance(self, invoice_id: str) -> float | None:
        inv = self.get_by_id(invoice_id)
        if inv is None:
            return None
        return max(inv.total - (inv.amount_received or 0.0), 0.0)
