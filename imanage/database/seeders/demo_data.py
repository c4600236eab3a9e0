#!/usr/bin/env python3
"""
Demo data for a fresh database: a handful of customers, vendors, employees,
vehicles, documents, payslips and six months of vehicle transactions.

Everything goes through the repositories (so totals and validation are the
real ones) inside a single BEGIN IMMEDIATE ... COMMIT; a failure part-way
rolls the whole population back.

    python -m imanage.database.seeders.demo_data [--db PATH] [--months 6] [--rng-seed 42]
"""
from __future__ import annotations

import argparse
from datetime import date
import random
import sqlite3

from ...utils.helpers import months_before, next_document_number
from ...utils.loggers import get_logger
from ..repositories import (
    CustomersRepo,
    EmployeesRepo,
    InvoicesRepo,
    PayslipsRepo,
    PurchaseOrdersRepo,
    QuotesRepo,
    VehiclesRepo,
    VehicleTransactionsRepo,
    VendorsRepo,
)

_log = get_logger(__name__)

CUSTOMERS = [
    ("Al Noor Contracting", "Al Noor LLC", "ops@alnoor.example"),
    ("Gulf Build Co", "Gulf Build", "info@gulfbuild.example"),
    ("Desert Logistics", None, "fleet@desertlog.example"),
]
VENDORS = [
    ("Emirates Auto Parts", "Rashid"),
    ("Prime Fuel Supply", "Anita"),
]
EMPLOYEES = [
    ("Imran Khan", "EMP-001", "Driver", "salary", None, 3500.0),
    ("Joseph Mathew", "EMP-002", "Operator", "hourly", 25.0, None),
]
VEHICLES = [
    ("DXB-10231", "Truck", "Volvo", "FH16", 2021, 950.0),
    ("DXB-44810", "Crane", "Liebherr", "LTM 1050", 2019, 1800.0),
    ("SHJ-7702", "Pickup", "Toyota", "Hilux", 2022, 300.0),
]
EXPENSE_CATEGORIES = ["Fuel", "Maintenance", "Insurance", "Driver Salary"]


def populate(conn: sqlite3.Connection, months: int = 6, rng_seed: int = 42,
             today: date | None = None) -> dict:
    """Insert the demo set. Returns the number of rows created per entity."""
    rng = random.Random(rng_seed)
    today = today or date.today()
    months = max(1, min(months, 12))
    created = {}

    if conn.in_transaction:
        conn.commit()
    conn.execute("BEGIN IMMEDIATE")
    try:
        customers = CustomersRepo(conn)
        vendors = VendorsRepo(conn)
        employees = EmployeesRepo(conn)
        vehicles = VehiclesRepo(conn)
        quotes = QuotesRepo(conn)
        pos = PurchaseOrdersRepo(conn)
        invoices = InvoicesRepo(conn)
        payslips = PayslipsRepo(conn)
        txs = VehicleTransactionsRepo(conn, today=lambda: today)

        cust = [customers.create({"name": n, "company": c, "email": e}) for n, c, e in CUSTOMERS]
        vend = [vendors.create({"name": n, "contact_person": p}) for n, p in VENDORS]
        emps = [
            employees.create({"name": n, "employee_id": eid, "role": r, "payment_type": pt,
                              "hourly_rate": hr, "salary": s})
            for n, eid, r, pt, hr, s in EMPLOYEES
        ]
        vehs = [
            vehicles.create({"vehicle_number": num, "vehicle_type": t, "make": mk, "model": md,
                             "year": y, "base_price": bp})
            for num, t, mk, md, y, bp in VEHICLES
        ]

        n_docs = 0
        for i, customer in enumerate(cust, start=1):
            vehicle = vehs[i % len(vehs)]
            items = [{
                "vehicle_type_id": vehicle.id,
                "vehicle_type_label": vehicle.vehicle_type,
                "vehicle_number": vehicle.vehicle_number,
                "description": f"{vehicle.vehicle_type} rental",
                "rental_basis": "monthly",
                "quantity": rng.randint(1, 3),
                "unit_price": vehicle.base_price,
                "tax_percent": 5,
            }]
            quote = quotes.create({
                "number": next_document_number("Q-YYYYMMDD-NNNN", today, i),
                "date": today.isoformat(), "customer_id": customer.id, "items": items,
            })
            invoice = invoices.create({
                "number": next_document_number("INV-YYYYMMDD-NNNN", today, i),
                "date": today.isoformat(), "customer_id": customer.id, "quote_id": quote.id,
                "items": items, "status": "invoice_sent",
            })
            txs.create({
                "vehicle_id": vehicle.id, "transaction_type": "revenue",
                "category": "Rental Income", "amount": invoice.total,
                "date": today.isoformat(), "invoice_id": invoice.id,
                "description": f"Invoice {invoice.number}",
            })
            n_docs += 1

        for i, vendor in enumerate(vend, start=1):
            pos.create({
                "number": next_document_number("PO-YYYYMMDD-NNNN", today, i),
                "date": today.isoformat(), "vendor_id": vendor.id,
                "items": [{"description": "Spare parts", "quantity": rng.randint(2, 10),
                           "unit_price": rng.choice([45.0, 120.0, 310.0]), "tax_percent": 5}],
            })

        n_tx = 0
        for back in range(months):
            when = months_before(today, back).replace(day=1) if back else today
            for vehicle in vehs:
                txs.create({
                    "vehicle_id": vehicle.id, "transaction_type": "revenue",
                    "category": "Rental Income",
                    "amount": round(vehicle.base_price * rng.uniform(8, 20), 2),
                    "date": when.isoformat(),
                })
                txs.create({
                    "vehicle_id": vehicle.id, "transaction_type": "expense",
                    "category": rng.choice(EXPENSE_CATEGORIES),
                    "amount": round(rng.uniform(150, 1200), 2),
                    "date": when.isoformat(),
                    "employee_id": rng.choice(emps).id,
                })
                n_tx += 2
            for emp in emps:
                payslips.create({
                    "employee_id": emp.id, "month": when.isoformat()[:7],
                    "base_salary": emp.salary or (emp.hourly_rate or 0) * 200,
                    "overtime_hours": rng.randint(0, 20), "overtime_rate": 20,
                    "status": "paid" if back else "processed",
                })
        conn.commit()
    except Exception:
        conn.rollback()
        _log.exception("Demo population failed; rolled back")
        raise

    created.update(
        customers=len(cust), vendors=len(vend), employees=len(emps), vehicles=len(vehs),
        quotes=n_docs, invoices=n_docs, purchase_orders=len(vend),
        vehicle_transactions=n_tx + n_docs, payslips=months * len(emps),
    )
    _log.info("Demo data created: %s", created)
    return created


def main(argv=None) -> int:
    from .. import get_connection

    parser = argparse.ArgumentParser(description="Populate demo data")
    parser.add_argument("--db", help="Path to SQLite DB (defaults to the configured DB_PATH)")
    parser.add_argument("--months", type=int, default=6)
    parser.add_argument("--rng-seed", type=int, default=42)
    args = parser.parse_args(argv)

    conn = get_connection(args.db)
    try:
        populate(conn, months=args.months, rng_seed=args.rng_seed)
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
