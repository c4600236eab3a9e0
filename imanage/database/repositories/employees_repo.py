from __future__ import annotations
from dataclasses import dataclass

from .base import BaseRepo
from .reference_guard import Dependent


@dataclass
class Employee:
    id: str | None = None
    name: str | None = None
    employee_id: str | None = None
    role: str | None = None
    payment_type: str | None = None  # 'salary' | 'hourly'
    hourly_rate: float | None = None
    salary: float | None = None
    overtime_rate: float | None = None
    bank_details: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class EmployeesRepo(BaseRepo):
    table = "employees"
    entity = "Employee"
    record_cls = Employee
    required = {"name": "Employee name is required"}
    order_by = "name"
    dependents = (
        # payslips are labelled by their month, falling back to the id
        Dependent("Payslip",
                  "SELECT COALESCE(NULLIF(month, ''), id) FROM payslips "
                  "WHERE employee_id = ? ORDER BY month"),
        Dependent("Vehicle Transaction",
                  "SELECT COALESCE(NULLIF(description, ''), id) FROM vehicle_transactions "
                  "WHERE employee_id = ? ORDER BY date"),
    )
