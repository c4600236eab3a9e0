"""
database/module_cleanup.py

Bulk deletion of whole data modules (e.g. "Quotations" = quotes + quote_items).

Public Interface
----------------
- MODULES                                  ordered module definitions
- get_module(module_id) -> Module
- record_counts(conn, module) -> dict[table, int]
- delete_modules(conn, module_ids) -> dict[module_id, dict[table, int]]

All selected modules are deleted inside one BEGIN IMMEDIATE ... COMMIT; any
failure rolls the whole batch back, so the database is never left with a
partially deleted module. A FOREIGN KEY failure surfaces as ConflictError
naming the parent table; delete the dependent modules first (or in the same
batch, listed before their parents).

Command line:
    python -m imanage.database.module_cleanup --list
    python -m imanage.database.module_cleanup --yes invoices quotes
"""
from __future__ import annotations

import argparse
from dataclasses import dataclass, field
import sqlite3
import sys
from typing import Dict, Iterable, List, Tuple

from ..errors import ConflictError, ValidationError
from ..utils.loggers import get_logger

_log = get_logger(__name__)

__all__ = [
    "Module",
    "MODULES",
    "get_module",
    "record_counts",
    "delete_modules",
]


@dataclass(frozen=True)
class Module:
    id: str
    name: str
    # first table is the parent; the rest go with it through ON DELETE CASCADE
    tables: Tuple[str, ...]
    dependencies: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = field(default=())
    # restricts which parent rows are deleted/counted
    where: str = ""


MODULES: List[Module] = [
    Module("quotes", "Quotations", ("quotes", "quote_items"), ("invoices",),
           ("Deleting quotations may affect invoices that reference them",)),
    Module("invoices", "Invoices", ("invoices", "invoice_items"), ("vehicle_transactions",),
           ("Deleting invoices may affect vehicle transactions that reference them",)),
    Module("purchase_orders", "Purchase Orders", ("purchase_orders", "po_items"), ("invoices",),
           ("Deleting purchase orders may affect invoices that reference them",)),
    Module("customers", "Customers", ("customers",), ("quotes", "invoices"),
           ("Deleting customers will fail if they have associated quotes or invoices",)),
    Module("vendors", "Vendors", ("vendors",), ("purchase_orders", "invoices"),
           ("Deleting vendors will fail if they have associated purchase orders or invoices",)),
    Module("vehicles", "Vehicles", ("vehicles", "vehicle_transactions"), ("quotes", "invoices"),
           ("Deleting vehicles will also delete all vehicle transactions",)),
    Module("employees", "Employees", ("employees",), ("payslips", "vehicle_transactions"),
           ("Deleting employees will fail if they have associated payslips",)),
    Module("payslips", "Payslips", ("payslips",)),
    Module("vehicle_transactions", "Vehicle Transactions", ("vehicle_transactions",)),
    Module("expense_categories", "Expense Categories (Custom Only)", ("expense_categories",),
           ("vehicle_transactions",),
           ("Only custom expense categories will be deleted",),
           where="is_custom = 1"),
]

_BY_ID: Dict[str, Module] = {m.id: m for m in MODULES}


def get_module(module_id: str) -> Module:
    try:
        return _BY_ID[module_id]
    except KeyError:
        raise ValidationError(f'Unknown module "{module_id}"') from None


def _count(conn: sqlite3.Connection, table: str, where: str = "") -> int:
    sql = f"SELECT COUNT(*) FROM {table}"
    if where:
        sql += f" WHERE {where}"
    return int(conn.execute(sql).fetchone()[0])


def record_counts(conn: sqlite3.Connection, module: Module) -> Dict[str, int]:
    counts = {t: _count(conn, t) for t in module.tables}
    if module.where:
        counts[module.tables[0]] = _count(conn, module.tables[0], module.where)
    return counts


def _delete_one(conn: sqlite3.Connection, module: Module) -> Dict[str, int]:
    """No commit here; caller controls transaction."""
    parent, children = module.tables[0], module.tables[1:]
    # child rows go with the parent via CASCADE; count them first for the report
    deleted = {t: _count(conn, t) for t in children}
    sql = f"DELETE FROM {parent}"
    if module.where:
        sql += f" WHERE {module.where}"
    try:
        deleted[parent] = conn.execute(sql).rowcount
    except sqlite3.IntegrityError as e:
        if "FOREIGN KEY" in str(e).upper():
            raise ConflictError(
                f"Cannot delete {parent}: there are dependent records. "
                "Delete dependent modules first."
            ) from e
        raise
    return {t: deleted[t] for t in module.tables}


def delete_modules(conn: sqlite3.Connection, module_ids: Iterable[str]) -> Dict[str, Dict[str, int]]:
    modules = [get_module(mid) for mid in module_ids]
    results: Dict[str, Dict[str, int]] = {}
    if conn.in_transaction:
        conn.commit()
    conn.execute("BEGIN IMMEDIATE")
    try:
        for module in modules:
            results[module.id] = _delete_one(conn, module)
            _log.info("Deleted module %s: %s", module.name, results[module.id])
        conn.commit()
    except Exception:
        conn.rollback()
        _log.warning("Module deletion rolled back")
        raise
    return results


def main(argv=None) -> int:
    from . import get_connection

    parser = argparse.ArgumentParser(description="Delete all data of selected modules")
    parser.add_argument("modules", nargs="*", help="Module ids (see --list)")
    parser.add_argument("--db", help="Path to SQLite DB (defaults to the configured DB_PATH)")
    parser.add_argument("--list", action="store_true", help="List modules with record counts")
    parser.add_argument("--yes", action="store_true", help="Delete without asking")
    args = parser.parse_args(argv)

    conn = get_connection(args.db)
    try:
        if args.list or not args.modules:
            for m in MODULES:
                counts = ", ".join(f"{t}={n}" for t, n in record_counts(conn, m).items())
                print(f"{m.id:22} {m.name:34} {counts}")
            return 0
        selected = [get_module(mid) for mid in args.modules]
        for m in selected:
            for warning in m.warnings:
                print(f"! {m.name}: {warning}")
        if not args.yes:
            answer = input(f"Delete {', '.join(m.name for m in selected)}? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                print("Aborted.")
                return 1
        try:
            results = delete_modules(conn, args.modules)
        except ConflictError as e:
            print(f"✗ {e}", file=sys.stderr)
            return 2
        for mid, counts in results.items():
            print(f"✓ {get_module(mid).name}: " + ", ".join(f"{t}={n}" for t, n in counts.items()))
        return 0
    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(main())
