from __future__ import annotations
from dataclasses import dataclass

from ...constants import PAYSLIP_STATUSES
from ...errors import ValidationError
from ...utils.helpers import normalize_month
from ...utils.validators import is_month_string, non_negative_or_zero
from .base import BaseRepo, ForeignKey

INVALID_MONTH = "Invalid month format. Expected YYYY-MM"


@dataclass
class Payslip:
    id: str | None = None
    employee_id: str | None = None
    month: str | None = None
    year: int | None = None
    base_salary: float = 0.0
    overtime_hours: float = 0.0
    overtime_rate: float = 0.0
    overtime_pay: float = 0.0
    deductions: float = 0.0
    deduction_remarks: str | None = None
    net_pay: float = 0.0
    status: str | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class PayslipsRepo(BaseRepo):
    table = "payslips"
    entity = "Payslip"
    record_cls = Payslip
    required = {"employee_id": "Employee ID is required", "month": "Month is required"}
    foreign_keys = (ForeignKey("employee_id", "employees", "Employee", nested="employee"),)
    defaults = {"status": "processed"}
    order_by = "month DESC, created_at DESC"

    def _derive(self, values, data, existing) -> None:
        if values.get("month"):
            month = normalize_month(values["month"])
            if not is_month_string(month):
                raise ValidationError(INVALID_MONTH)
            values["month"] = month
            if values.get("year") is None:
                values["year"] = int(month[:4])
        if values["status"] not in PAYSLIP_STATUSES:
            raise ValidationError(f'Invalid payslip status "{values["status"]}"')

        for column in ("base_salary", "overtime_hours", "overtime_rate", "deductions"):
            values[column] = non_negative_or_zero(values.get(column))
        if data.get("overtime_pay") is None:
            values["overtime_pay"] = values["overtime_hours"] * values["overtime_rate"]
        else:
            values["overtime_pay"] = non_negative_or_zero(values["overtime_pay"])
        if data.get("net_pay") is None:
            values["net_pay"] = (
                values["base_salary"] + values["overtime_pay"] - values["deductions"]
            )

    def get_by_month(self, month: str) -> list[Payslip]:
        """Payslips for one YYYY-MM month. Raises ValidationError on a malformed month."""
        if not is_month_string(month):
            raise ValidationError(INVALID_MONTH)
        rows = self.conn.execute(
            "SELECT * FROM payslips WHERE month = ? ORDER BY created_at", (month,)
        ).fetchall()
        return [self._from_row(r) for r in rows]

    def get_by_employee(self, employee_id: str) -> list[Payslip]:
        rows = self.conn.execute(
            "SELECT * FROM payslips WHERE employee_id = ? ORDER BY month DESC", (employee_id,)
        ).fetchall()
        return [self._from_row(r) for r in rows]
