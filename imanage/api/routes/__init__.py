from . import (
    admin,
    customers,
    documents,
    employees,
    expense_categories,
    health,
    payslips,
    uploads,
    vehicle_finances,
    vehicle_transactions,
    vehicles,
    vendors,
)

ROUTERS = [
    health.router,
    customers.router,
    vendors.router,
    employees.router,
    vehicles.router,
    vehicle_transactions.router,
    vehicle_finances.router,
    expense_categories.router,
    documents.quotes_router,
    documents.purchase_orders_router,
    documents.invoices_router,
    payslips.router,
    admin.router,
    uploads.router,
]
