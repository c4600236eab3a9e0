"""
Repository for vehicle expense categories.

Predefined categories (is_custom = 0) are seeded with every database and can
be neither deleted nor renamed. Custom categories can be created, renamed and
deleted while no vehicle transaction uses them. Names are unique regardless
of case.
"""
from __future__ import annotations
from dataclasses import dataclass

from ...errors import ConflictError, ValidationError
from .base import BaseRepo


@dataclass
class ExpenseCategory:
    id: str | None = None
    name: str | None = None
    is_custom: bool = True
    created_at: str | None = None
    updated_at: str | None = None


class ExpenseCategoriesRepo(BaseRepo):
    table = "expense_categories"
    entity = "Expense Category"
    record_cls = ExpenseCategory
    required = {"name": "Category name is required"}
    # the column is COLLATE NOCASE, so the lookup is case-insensitive
    unique = {"name": "Category with this name already exists"}
    order_by = "is_custom ASC, name ASC"

    def _from_row(self, row):
        record = super()._from_row(row)
        record.is_custom = bool(record.is_custom)
        return record

    def _derive(self, values, data, existing) -> None:
        if existing is None:
            values["is_custom"] = 1
            return
        values["is_custom"] = 1 if existing.is_custom else 0
        if not existing.is_custom and (values.get("name") or "").lower() != existing.name.lower():
            raise ValidationError("Cannot rename predefined expense category")

    def get_by_name(self, name: str) -> ExpenseCategory | None:
        row = self.conn.execute(
            "SELECT * FROM expense_categories WHERE name = ?", (name.strip(),)
        ).fetchone()
        return None if row is None else self._from_row(row)

    def usage_count(self, name: str) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) FROM vehicle_transactions WHERE category = ? COLLATE NOCASE",
            (name,),
        ).fetchone()
        return int(row[0])

    def delete(self, record_id: str) -> bool:
        category = self.get_by_id(record_id)
        if category is None:
            return False
        if not category.is_custom:
            raise ConflictError("Cannot delete predefined expense category")
        if self.usage_count(category.name):
            raise ConflictError("Cannot delete expense category that is used in transactions")
        return super().delete(record_id)
