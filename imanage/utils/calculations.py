"""
utils/calculations.py

Line-item totals for documents (quotes, purchase orders, invoices).

Per line:
    gross_amount    = quantity * unit_price
    line_tax_amount = gross_amount * tax_percent / 100
    line_total      = gross_amount + line_tax_amount
    serial_number   = 1-based position

Document:
    sub_total = sum(gross_amount)
    total_tax = sum(line_tax_amount)
    total     = sub_total + total_tax

Missing, negative, unparsable or non-finite inputs count as 0, so a bad row
never turns a total into NaN. Pure functions: input mappings are not mutated.
Do not import repos or open DB connections here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping

from .validators import non_negative_or_zero

__all__ = [
    "DocumentTotals",
    "compute_line",
    "compute_totals",
]


@dataclass
class DocumentTotals:
    sub_total: float = 0.0
    total_tax: float = 0.0
    total: float = 0.0
    lines: List[dict] = field(default_factory=list)


def compute_line(item: Mapping[str, Any], position: int) -> dict:
    """Return a copy of `item` with derived amounts and serial_number filled in."""
    quantity = non_negative_or_zero(item.get("quantity"))
    unit_price = non_negative_or_zero(item.get("unit_price"))
    tax_percent = non_negative_or_zero(item.get("tax_percent"))

    gross = quantity * unit_price
    line_tax = gross * tax_percent / 100.0

    line = dict(item)
    line.update(
        serial_number=position,
        quantity=quantity,
        unit_price=unit_price,
        tax_percent=tax_percent,
        gross_amount=gross,
        line_tax_amount=line_tax,
        line_total=gross + line_tax,
    )
    return line


def compute_totals(items: Iterable[Mapping[str, Any]] | None) -> DocumentTotals:
    lines = [compute_line(it, pos) for pos, it in enumerate(items or [], start=1)]
    sub_total = sum(l["gross_amount"] for l in lines)
    total_tax = sum(l["line_tax_amount"] for l in lines)
    return DocumentTotals(
        sub_total=sub_total,
        total_tax=total_tax,
        total=sub_total + total_tax,
        lines=lines,
    )
