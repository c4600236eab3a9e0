from __future__ import annotations
from dataclasses import dataclass, fields
import sqlite3
from typing import Any, Mapping

from ...constants import ADMIN_SETTINGS_ID, DEFAULT_CURRENCY, DEFAULT_QUOTE_NUMBER_PATTERN
from ...errors import ValidationError
from ...utils.helpers import utc_now_iso
from ...utils.loggers import get_logger

_log = get_logger(__name__)

TOGGLES = (
    "show_revenue_trend",
    "show_quick_actions",
    "show_reports",
    "show_vehicle_finances",
    "show_quotations_invoices_card",
    "show_quotations_two_pane",
    "show_purchase_orders_two_pane",
    "show_invoices_two_pane",
    "show_employee_salaries_card",
    "show_vehicle_revenue_expenses_card",
    "show_activity_this_month",
    "show_financial_health",
    "show_business_overview",
    "show_top_customers",
    "show_activity_summary",
)


@dataclass
class AdminSettings:
    id: str = ADMIN_SETTINGS_ID
    company_name: str | None = None
    address: str | None = None
    vat_number: str | None = None
    logo_url: str | None = None
    seal_url: str | None = None
    signature_url: str | None = None
    quote_number_pattern: str = DEFAULT_QUOTE_NUMBER_PATTERN
    currency: str = DEFAULT_CURRENCY
    default_terms: str | None = None
    default_invoice_terms: str | None = None
    default_purchase_order_terms: str | None = None
    footer_address_english: str | None = None
    footer_address_arabic: str | None = None
    footer_contact_english: str | None = None
    footer_contact_arabic: str | None = None
    quote_starting_number: int = 1
    invoice_starting_number: int = 1
    show_revenue_trend: bool = True
    show_quick_actions: bool = True
    show_reports: bool = True
    show_vehicle_finances: bool = True
    show_quotations_invoices_card: bool = True
    show_quotations_two_pane: bool = False
    show_purchase_orders_two_pane: bool = False
    show_invoices_two_pane: bool = False
    show_employee_salaries_card: bool = True
    show_vehicle_revenue_expenses_card: bool = True
    show_activity_this_month: bool = True
    show_financial_health: bool = True
    show_business_overview: bool = True
    show_top_customers: bool = True
    show_activity_summary: bool = True
    created_at: str | None = None
    updated_at: str | None = None


_EDITABLE = [f.name for f in fields(AdminSettings) if f.name not in ("id", "created_at", "updated_at")]


class AdminSettingsRepo:
    """
    Singleton settings row (id = 'settings_1').

    Dashboard toggles are stored as 0/1 integers: only an explicit True is
    stored as 1. `save` merges the payload onto the current settings, so keys
    the caller leaves out keep their stored value.
    """

    def __init__(self, conn: sqlite3.Connection):
        conn.row_factory = sqlite3.Row
        self.conn = conn

    def _from_row(self, row: sqlite3.Row) -> AdminSettings:
        defaults = AdminSettings()
        kwargs: dict[str, Any] = {}
        for name in row.keys():
            if name not in _EDITABLE and name not in ("id", "created_at", "updated_at"):
                continue
            value = row[name]
            if name in TOGGLES:
                value = getattr(defaults, name) if value is None else bool(value)
            elif value is None and name in ("quote_number_pattern", "currency",
                                            "quote_starting_number", "invoice_starting_number"):
                value = getattr(defaults, name)
            kwargs[name] = value
        return AdminSettings(**kwargs)

    def get(self) -> AdminSettings:
        row = self.conn.execute(
            "SELECT * FROM admin_settings WHERE id = ?", (ADMIN_SETTINGS_ID,)
        ).fetchone()
        return AdminSettings() if row is None else self._from_row(row)

    def save(self, data: Mapping[str, Any]) -> AdminSettings:
        current = self.get()
        values: dict[str, Any] = {}
        for name in _EDITABLE:
            value = data[name] if name in data else getattr(current, name)
            if name in TOGGLES:
                value = 1 if value is True else 0
            elif name in ("quote_number_pattern", "currency") and not value:
                value = getattr(AdminSettings(), name)
            values[name] = value

        if "quote_number_pattern" in data and "NNNN" not in values["quote_number_pattern"]:
            raise ValidationError("Numbering pattern must contain NNNN")

        now = utc_now_iso()
        cols = ["id", *values.keys(), "created_at", "updated_at"]
        updates = ", ".join(f"{c} = excluded.{c}" for c in [*values.keys(), "updated_at"])
        with self.conn:
            self.conn.execute(
                f"INSERT INTO admin_settings({', '.join(cols)}) "
                f"VALUES ({', '.join('?' for _ in cols)}) "
                f"ON CONFLICT(id) DO UPDATE SET {updates}",
                [ADMIN_SETTINGS_ID, *values.values(), now, now],
            )
        _log.info("Admin settings saved")
        return self.get()
