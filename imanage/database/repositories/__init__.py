# database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from imanage.database.repositories import (
        CustomersRepo, Customer,
        QuotesRepo, Quote, InvoicesRepo, Invoice, LineItem,
        DashboardRepo,
        format_reference_error,
    )

Every repository takes the sqlite3.Connection returned by
imanage.database.get_connection(); none of them opens its own.
"""

# ---------------- Shared -----------------
from .base import BaseRepo, DocumentRepo, ForeignKey, LineItem, ITEM_COLUMNS
from .reference_guard import Dependent, ReferenceGuard, format_reference_error

# ---------------- Parties -----------------
from .customers_repo import CustomersRepo, Customer
from .vendors_repo import VendorsRepo, Vendor
from .employees_repo import EmployeesRepo, Employee

# ---------------- Fleet -----------------
from .vehicles_repo import VehiclesRepo, Vehicle
from .vehicle_transactions_repo import VehicleTransactionsRepo, VehicleTransaction
from .expense_categories_repo import ExpenseCategoriesRepo, ExpenseCategory

# ---------------- Documents -----------------
from .quotes_repo import QuotesRepo, Quote
from .purchase_orders_repo import PurchaseOrdersRepo, PurchaseOrder
from .invoices_repo import InvoicesRepo, Invoice

# ---------------- Payroll -----------------
from .payslips_repo import PayslipsRepo, Payslip

# ---------------- Settings / reporting -----------------
from .admin_settings_repo import AdminSettingsRepo, AdminSettings, TOGGLES
from .dashboard_repo import DashboardRepo, empty_dashboard_metrics, empty_profitability

__all__ = [
    "BaseRepo", "DocumentRepo", "ForeignKey", "LineItem", "ITEM_COLUMNS",
    "Dependent", "ReferenceGuard", "format_reference_error",
    "CustomersRepo", "Customer",
    "VendorsRepo", "Vendor",
    "EmployeesRepo", "Employee",
    "VehiclesRepo", "Vehicle",
    "VehicleTransactionsRepo", "VehicleTransaction",
    "ExpenseCategoriesRepo", "ExpenseCategory",
    "QuotesRepo", "Quote",
    "PurchaseOrdersRepo", "PurchaseOrder",
    "InvoicesRepo", "Invoice",
    "PayslipsRepo", "Payslip",
    "AdminSettingsRepo", "AdminSettings", "TOGGLES",
    "DashboardRepo", "empty_dashboard_metrics", "empty_profitability",
]
