import sqlite3

import pytest

from imanage.constants import SCHEMA_VERSION
from imanage.database import connect, get_connection
from imanage.database.schema import init_schema, table_columns
from imanage.database.versioning import get_current_version
from imanage.errors import UnavailableError


def test_fresh_database_has_all_tables(conn):
    tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {
        "admin_settings", "customers", "vendors", "employees", "vehicles",
        "quotes", "quote_items", "purchase_orders", "po_items", "invoices", "invoice_items",
        "payslips", "expense_categories", "vehicle_transactions",
    } <= tables
    assert get_current_version(conn) == SCHEMA_VERSION
    assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1


def test_old_tables_gain_new_columns(tmp_path):
    path = tmp_path / "old.db"
    old = sqlite3.connect(path)
    old.executescript("""
        CREATE TABLE admin_settings (id TEXT PRIMARY KEY, company_name TEXT, address TEXT,
            vat_number TEXT, logo_url TEXT, seal_url TEXT, signature_url TEXT,
            quote_number_pattern TEXT, currency TEXT, default_terms TEXT,
            created_at TEXT, updated_at TEXT);
        INSERT INTO admin_settings(id, company_name) VALUES ('settings_1', 'Legacy Co');
    """)
    old.commit()
    old.close()

    conn = get_connection(path)
    try:
        cols = table_columns(conn, "admin_settings")
        assert {"invoice_starting_number", "show_activity_summary", "footer_contact_arabic"} <= cols
        assert "tax_override" in table_columns(conn, "invoices")
        row = conn.execute("SELECT company_name, show_reports FROM admin_settings").fetchone()
        assert tuple(row) == ("Legacy Co", 1)
    finally:
        conn.close()


def test_init_schema_is_idempotent(conn):
    init_schema(conn)
    init_schema(conn)
    assert conn.execute("SELECT COUNT(*) FROM expense_categories").fetchone()[0] == 7


def test_unopenable_path_is_unavailable(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    with pytest.raises(UnavailableError, match="Database is not available"):
        connect(blocker / "nested" / "db.sqlite")
