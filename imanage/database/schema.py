from pathlib import Path
import sqlite3
import sys

from ..constants import SCHEMA_VERSION
from ..utils.loggers import get_logger
from .versioning import is_current, set_current_version

_log = get_logger(__name__)

# Columns shared by quote_items / po_items / invoice_items.
_ITEM_COLUMNS = r"""
    serial_number      INTEGER,
    vehicle_type_id    TEXT,
    vehicle_type_label TEXT,
    vehicle_number     TEXT,
    description        TEXT,
    rental_basis       TEXT,
    quantity           REAL NOT NULL DEFAULT 0,
    unit_price         REAL NOT NULL DEFAULT 0,
    tax_percent        REAL NOT NULL DEFAULT 0,
    gross_amount       REAL NOT NULL DEFAULT 0,
    line_tax_amount    REAL NOT NULL DEFAULT 0,
    line_total         REAL NOT NULL DEFAULT 0
"""

SQL = r"""
PRAGMA foreign_keys = ON;

/* ======================== SETTINGS ======================== */

CREATE TABLE IF NOT EXISTS admin_settings (
    id                          TEXT PRIMARY KEY,
    company_name                TEXT,
    address                     TEXT,
    vat_number                  TEXT,
    logo_url                    TEXT,
    seal_url                    TEXT,
    signature_url               TEXT,
    quote_number_pattern        TEXT DEFAULT 'AAT-YYYYMMDD-NNNN',
    currency                    TEXT DEFAULT 'AED',
    default_terms               TEXT,
    created_at                  TEXT,
    updated_at                  TEXT
);

/* ======================== PARTIES ======================== */

CREATE TABLE IF NOT EXISTS customers (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    company     TEXT,
    email       TEXT,
    phone       TEXT,
    address     TEXT,
    created_at  TEXT,
    updated_at  TEXT
);

CREATE TABLE IF NOT EXISTS vendors (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    contact_person  TEXT,
    email           TEXT,
    phone           TEXT,
    address         TEXT,
    bank_details    TEXT,
    payment_terms   TEXT,
    created_at      TEXT,
    updated_at      TEXT
);

CREATE TABLE IF NOT EXISTS employees (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    employee_id     TEXT,
    role            TEXT,
    payment_type    TEXT,
    hourly_rate     REAL,
    salary          REAL,
    overtime_rate   REAL,
    bank_details    TEXT,
    created_at      TEXT,
    updated_at      TEXT
);

/* ======================== FLEET ======================== */

CREATE TABLE IF NOT EXISTS vehicles (
    id                      TEXT PRIMARY KEY,
    vehicle_number          TEXT NOT NULL UNIQUE,
    vehicle_type            TEXT,
    make                    TEXT,
    model                   TEXT,
    year                    INTEGER,
    color                   TEXT,
    purchase_price          REAL,
    purchase_date           TEXT,
    current_value           REAL,
    insurance_cost_monthly  REAL,
    financing_cost_monthly  REAL,
    odometer_reading        REAL,
    last_service_date       TEXT,
    next_service_due        TEXT,
    fuel_type               TEXT,
    status                  TEXT DEFAULT 'active',
    registration_expiry     TEXT,
    insurance_expiry        TEXT,
    description             TEXT,
    base_price              REAL,
    notes                   TEXT,
    created_at              TEXT,
    updated_at              TEXT
);

/* ======================== DOCUMENTS ======================== */

CREATE TABLE IF NOT EXISTS quotes (
    id          TEXT PRIMARY KEY,
    number      TEXT NOT NULL UNIQUE,
    date        TEXT NOT NULL,
    valid_until TEXT,
    currency    TEXT DEFAULT 'AED',
    customer_id TEXT REFERENCES customers(id),
    sub_total   REAL NOT NULL DEFAULT 0,
    total_tax   REAL NOT NULL DEFAULT 0,
    total       REAL NOT NULL DEFAULT 0,
    terms       TEXT,
    notes       TEXT,
    created_at  TEXT,
    updated_at  TEXT
);

CREATE TABLE IF NOT EXISTS quote_items (
    id       TEXT PRIMARY KEY,
    quote_id TEXT NOT NULL REFERENCES quotes(id) ON DELETE CASCADE,
    {items}
);
CREATE INDEX IF NOT EXISTS idx_quote_items_quote ON quote_items(quote_id);
CREATE INDEX IF NOT EXISTS idx_quote_items_vehicle ON quote_items(vehicle_type_id);

CREATE TABLE IF NOT EXISTS purchase_orders (
    id          TEXT PRIMARY KEY,
    number      TEXT NOT NULL UNIQUE,
    date        TEXT NOT NULL,
    vendor_id   TEXT NOT NULL REFERENCES vendors(id),
    subtotal    REAL NOT NULL DEFAULT 0,
    tax         REAL NOT NULL DEFAULT 0,
    amount      REAL NOT NULL DEFAULT 0,
    currency    TEXT DEFAULT 'AED',
    status      TEXT NOT NULL DEFAULT 'draft'
                CHECK (status IN ('draft','sent','accepted')),
    terms       TEXT,
    notes       TEXT,
    created_at  TEXT,
    updated_at  TEXT
);

CREATE TABLE IF NOT EXISTS po_items (
    id                TEXT PRIMARY KEY,
    purchase_order_id TEXT NOT NULL REFERENCES purchase_orders(id) ON DELETE CASCADE,
    {items}
);
CREATE INDEX IF NOT EXISTS idx_po_items_po ON po_items(purchase_order_id);

CREATE TABLE IF NOT EXISTS invoices (
    id                TEXT PRIMARY KEY,
    number            TEXT NOT NULL UNIQUE,
    date              TEXT NOT NULL,
    due_date          TEXT,
    customer_id       TEXT NOT NULL REFERENCES customers(id),
    vendor_id         TEXT REFERENCES vendors(id),
    purchase_order_id TEXT REFERENCES purchase_orders(id),
    quote_id          TEXT REFERENCES quotes(id),
    subtotal          REAL NOT NULL DEFAULT 0,
    tax               REAL NOT NULL DEFAULT 0,
    total             REAL NOT NULL DEFAULT 0,
    amount_received   REAL NOT NULL DEFAULT 0,
    status            TEXT NOT NULL DEFAULT 'draft'
                      CHECK (status IN ('draft','invoice_sent','payment_received')),
    terms             TEXT,
    notes             TEXT,
    created_at        TEXT,
    updated_at        TEXT
);

CREATE TABLE IF NOT EXISTS invoice_items (
    id         TEXT PRIMARY KEY,
    invoice_id TEXT NOT NULL REFERENCES invoices(id) ON DELETE CASCADE,
    {items}
);
CREATE INDEX IF NOT EXISTS idx_invoice_items_invoice ON invoice_items(invoice_id);
CREATE INDEX IF NOT EXISTS idx_invoice_items_vehicle ON invoice_items(vehicle_type_id);

CREATE INDEX IF NOT EXISTS idx_invoices_customer ON invoices(customer_id);
CREATE INDEX IF NOT EXISTS idx_invoices_status ON invoices(status);
CREATE INDEX IF NOT EXISTS idx_purchase_orders_vendor ON purchase_orders(vendor_id);
CREATE INDEX IF NOT EXISTS idx_purchase_orders_status ON purchase_orders(status);

/* ======================== PAYROLL ======================== */

CREATE TABLE IF NOT EXISTS payslips (
    id                TEXT PRIMARY KEY,
    employee_id       TEXT NOT NULL REFERENCES employees(id),
    month             TEXT NOT NULL,
    year              INTEGER,
    base_salary       REAL NOT NULL DEFAULT 0,
    overtime_hours    REAL NOT NULL DEFAULT 0,
    overtime_rate     REAL NOT NULL DEFAULT 0,
    overtime_pay      REAL NOT NULL DEFAULT 0,
    deductions        REAL NOT NULL DEFAULT 0,
    deduction_remarks TEXT,
    net_pay           REAL NOT NULL DEFAULT 0,
    status            TEXT NOT NULL DEFAULT 'processed'
                      CHECK (status IN ('draft','processed','paid')),
    notes             TEXT,
    created_at        TEXT,
    updated_at        TEXT
);
CREATE INDEX IF NOT EXISTS idx_payslips_month ON payslips(month);

/* ======================== VEHICLE FINANCES ======================== */

CREATE TABLE IF NOT EXISTS expense_categories (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL UNIQUE COLLATE NOCASE,
    is_custom   INTEGER NOT NULL DEFAULT 0 CHECK (is_custom IN (0,1)),
    created_at  TEXT,
    updated_at  TEXT
);

CREATE TABLE IF NOT EXISTS vehicle_transactions (
    id                TEXT PRIMARY KEY,
    vehicle_id        TEXT NOT NULL REFERENCES vehicles(id) ON DELETE CASCADE,
    transaction_type  TEXT NOT NULL CHECK (transaction_type IN ('expense','revenue')),
    category          TEXT,
    amount            REAL NOT NULL CHECK (amount > 0),
    date              TEXT NOT NULL,
    month             TEXT NOT NULL,
    description       TEXT,
    employee_id       TEXT REFERENCES employees(id),
    invoice_id        TEXT REFERENCES invoices(id),
    purchase_order_id TEXT REFERENCES purchase_orders(id),
    quote_id          TEXT REFERENCES quotes(id),
    created_at        TEXT,
    updated_at        TEXT
);
CREATE INDEX IF NOT EXISTS idx_vehicle_transactions_vehicle ON vehicle_transactions(vehicle_id);
CREATE INDEX IF NOT EXISTS idx_vehicle_transactions_date ON vehicle_transactions(date);
CREATE INDEX IF NOT EXISTS idx_vehicle_transactions_month ON vehicle_transactions(month);
CREATE INDEX IF NOT EXISTS idx_vehicle_transactions_type ON vehicle_transactions(transaction_type);
""".replace("{items}", _ITEM_COLUMNS.strip())


# Columns added after the first release. Older databases get them through
# ALTER TABLE ... ADD COLUMN; fresh ones pick them up the same way.
MIGRATIONS: dict[str, list[tuple[str, str]]] = {
    "admin_settings": [
        ("default_invoice_terms", "TEXT"),
        ("default_purchase_order_terms", "TEXT"),
        ("footer_address_english", "TEXT"),
        ("footer_address_arabic", "TEXT"),
        ("footer_contact_english", "TEXT"),
        ("footer_contact_arabic", "TEXT"),
        ("quote_starting_number", "INTEGER DEFAULT 1"),
        ("invoice_starting_number", "INTEGER DEFAULT 1"),
        ("show_revenue_trend", "INTEGER DEFAULT 1"),
        ("show_quick_actions", "INTEGER DEFAULT 1"),
        ("show_reports", "INTEGER DEFAULT 1"),
        ("show_vehicle_finances", "INTEGER DEFAULT 1"),
        ("show_quotations_invoices_card", "INTEGER DEFAULT 1"),
        ("show_quotations_two_pane", "INTEGER DEFAULT 0"),
        ("show_purchase_orders_two_pane", "INTEGER DEFAULT 0"),
        ("show_invoices_two_pane", "INTEGER DEFAULT 0"),
        ("show_employee_salaries_card", "INTEGER DEFAULT 1"),
        ("show_vehicle_revenue_expenses_card", "INTEGER DEFAULT 1"),
        ("show_activity_this_month", "INTEGER DEFAULT 1"),
        ("show_financial_health", "INTEGER DEFAULT 1"),
        ("show_business_overview", "INTEGER DEFAULT 1"),
        ("show_top_customers", "INTEGER DEFAULT 1"),
        ("show_activity_summary", "INTEGER DEFAULT 1"),
    ],
    "invoices": [
        ("tax_override", "REAL"),
    ],
}


def table_columns(conn: sqlite3.Connection, table: str) -> set[str]:
    cur = conn.execute(f"PRAGMA table_info({table});")
    return {row[1] for row in cur.fetchall()}  # row[1] = name


def _ensure_columns(conn: sqlite3.Connection, table: str, columns: list[tuple[str, str]]) -> list[str]:
    """
    Additive migration: adds each missing column. No-op for columns already present.
    Returns the names that were added.
    """
    existing = table_columns(conn, table)
    added = []
    for name, decl in columns:
        if name not in existing:
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl};")
            added.append(name)
    return added


def init_schema(conn: sqlite3.Connection) -> None:
    """
    Apply the (idempotent) schema script and the column migrations to `conn`,
    then record SCHEMA_VERSION. Safe to call on every start.
    """
    conn.executescript(SQL)
    for table, columns in MIGRATIONS.items():
        added = _ensure_columns(conn, table, columns)
        if added:
            _log.info("Migrated %s: added %s", table, ", ".join(added))
    if not is_current(conn):
        set_current_version(conn, SCHEMA_VERSION)
    conn.commit()


def apply_to_file(db_path: Path | str) -> None:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
        init_schema(conn)
    finally:
        conn.close()
    _log.info("Schema applied to %s", db_path)


if __name__ == "__main__":
    from ..config import DB_PATH

    apply_to_file(sys.argv[1] if len(sys.argv) > 1 else DB_PATH)
