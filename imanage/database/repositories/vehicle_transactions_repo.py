from __future__ import annotations
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Callable, Mapping

from ...constants import TRANSACTION_LOOKBACK_MONTHS, TRANSACTION_TYPES
from ...errors import NotFoundError, ValidationError
from ...utils.helpers import months_before, normalize_month
from ...utils.validators import is_strictly_positive_number, parse_float
from .base import BaseRepo, ForeignKey


@dataclass
class VehicleTransaction:
    id: str | None = None
    vehicle_id: str | None = None
    transaction_type: str | None = None
    category: str | None = None
    amount: float = 0.0
    date: str | None = None
    month: str | None = None
    description: str | None = None
    employee_id: str | None = None
    invoice_id: str | None = None
    purchase_order_id: str | None = None
    quote_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class VehicleTransactionsRepo(BaseRepo):
    """
    Revenue / expense rows per vehicle.

    `month` is always derived from `date` (first 7 characters). Dates must
    fall within the last 12 months and not in the future; amounts must be
    positive. Rows disappear with their vehicle (ON DELETE CASCADE).
    """

    table = "vehicle_transactions"
    entity = "Vehicle Transaction"
    record_cls = VehicleTransaction
    required = {"date": "Transaction date is required"}
    foreign_keys = (
        ForeignKey("vehicle_id", "vehicles", "Vehicle", nested="vehicle",
                   required_message="Vehicle is required for transaction"),
        ForeignKey("employee_id", "employees", "Employee", nested="employee"),
        ForeignKey("invoice_id", "invoices", "Invoice", nested="invoice"),
        ForeignKey("purchase_order_id", "purchase_orders", "Purchase Order",
                   nested="purchase_order"),
        ForeignKey("quote_id", "quotes", "Quote", nested="quote"),
    )
    blank_as_null = ("category", "description")
    order_by = "date DESC, created_at DESC"

    def __init__(self, conn, today: Callable[[], date] = date.today):
        super().__init__(conn)
        self._today = today

    # ---- Validation -------------------------------------------------------

    def _validate_date(self, raw: str) -> None:
        try:
            when = date.fromisoformat(str(raw)[:10])
        except ValueError:
            raise ValidationError(f'Invalid transaction date "{raw}"') from None
        today = self._today()
        if when > today:
            raise ValidationError("Transaction date cannot be in the future")
        if when < months_before(today, TRANSACTION_LOOKBACK_MONTHS):
            raise ValidationError("Transaction date cannot be more than 12 months in the past")

    def _derive(self, values: dict, data: Mapping[str, Any], existing) -> None:
        if values.get("transaction_type") not in TRANSACTION_TYPES:
            raise ValidationError("Transaction type must be 'expense' or 'revenue'")
        if not is_strictly_positive_number(values.get("amount")):
            raise ValidationError("Transaction amount must be greater than 0")
        values["amount"] = parse_float(values["amount"])
        if values.get("date"):
            # the window applies to new or changed dates only
            if existing is None or str(values["date"]) != str(existing.date):
                self._validate_date(values["date"])
            values["month"] = str(values["date"])[:7]

    # ---- Queries ----------------------------------------------------------

    def get_by_vehicle_id(self, vehicle_id: str) -> list[VehicleTransaction]:
        rows = self.conn.execute(
            "SELECT * FROM vehicle_transactions WHERE vehicle_id = ? "
            "ORDER BY date DESC, created_at DESC",
            (vehicle_id,),
        ).fetchall()
        return [self._from_row(r) for r in rows]

    def get_by_vehicle_id_and_month(self, vehicle_id: str, month: str) -> list[VehicleTransaction]:
        rows = self.conn.execute(
            "SELECT * FROM vehicle_transactions WHERE vehicle_id = ? AND month = ? "
            "ORDER BY date DESC, created_at DESC",
            (vehicle_id, normalize_month(month)),
        ).fetchall()
        return [self._from_row(r) for r in rows]

    # ---- Update (merge) ---------------------------------------------------

    def update(self, record_id: str, data: Mapping[str, Any]):
        """
        Partial update: `data` is merged onto the stored row, then validated
        like a create. `month` follows the (possibly new) date.
        """
        existing = self.get_by_id(record_id)
        if existing is None:
            raise NotFoundError(f'Transaction with ID "{record_id}" does not exist')
        merged = asdict(existing)
        merged.update(data)
        return super().update(record_id, merged)
