from __future__ import annotations
from dataclasses import dataclass, field

from ...constants import DEFAULT_CURRENCY, DEFAULT_QUOTE_NUMBER_PATTERN
from .base import DocumentRepo, ForeignKey, LineItem
from .reference_guard import Dependent


@dataclass
class Quote:
    id: str | None = None
    number: str | None = None
    date: str | None = None
    valid_until: str | None = None
    currency: str | None = None
    customer_id: str | None = None
    sub_total: float = 0.0
    total_tax: float = 0.0
    total: float = 0.0
    terms: str | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    items: list[LineItem] = field(default_factory=list)


class QuotesRepo(DocumentRepo):
    table = "quotes"
    entity = "Quote"
    record_cls = Quote
    item_table = "quote_items"
    item_parent_column = "quote_id"
    totals_columns = ("sub_total", "total_tax", "total")
    number_pattern = DEFAULT_QUOTE_NUMBER_PATTERN
    number_pattern_setting = "quote_number_pattern"
    starting_number_setting = "quote_starting_number"
    required = {"number": "Quote number is required", "date": "Quote date is required"}
    unique = {"number": 'Quote number "{value}" already exists'}
    foreign_keys = (
        ForeignKey("customer_id", "customers", "Customer", nested="customer",
                   required_message="Customer is required for quote"),
    )
    defaults = {"currency": DEFAULT_CURRENCY}
    blank_as_null = ("valid_until",)
    dependents = (
        Dependent("Invoice", "SELECT number FROM invoices WHERE quote_id = ? ORDER BY number"),
        Dependent("Vehicle Transaction",
                  "SELECT COALESCE(NULLIF(description, ''), id) FROM vehicle_transactions "
                  "WHERE quote_id = ? ORDER BY date"),
    )

    def get_by_customer(self, customer_id: str) -> list[Quote]:
        rows = self.conn.execute(
            "SELECT * FROM quotes WHERE customer_id = ? ORDER BY date DESC", (customer_id,)
        ).fetchall()
        return [self._from_row(r) for r in rows]
