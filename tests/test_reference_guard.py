import sqlite3

import pytest

from imanage.database.repositories import (
    CustomersRepo,
    InvoicesRepo,
    QuotesRepo,
    ReferenceGuard,
    format_reference_error,
)
from imanage.errors import ConflictError, Reference, ReferenceConflictError


def test_format_shapes():
    assert format_reference_error("Customer", []) == ""
    assert (format_reference_error("Customer", [Reference("Quote", "Q-1")])
            == "Cannot delete Customer as it is referenced in Quote Q-1")
    assert format_reference_error(
        "Customer", [Reference("Quote", "Q-1"), Reference("Invoice", "INV-7")]
    ) == "Cannot delete Customer as it is referenced in:\n- Quote Q-1\n- Invoice INV-7"


def test_customer_with_quote_and_invoice_is_blocked(conn, customer, line):
    QuotesRepo(conn).create({"number": "Q-1", "date": "2025-06-01",
                             "customer_id": customer.id, "items": [line()]})
    InvoicesRepo(conn).create({"number": "INV-1", "date": "2025-06-02",
                               "customer_id": customer.id, "items": [line()]})

    with pytest.raises(ReferenceConflictError) as exc:
        CustomersRepo(conn).delete(customer.id)

    err = exc.value
    assert err.references == [Reference("Quote", "Q-1"), Reference("Invoice", "INV-1")]
    assert err.message == (
        "Cannot delete Customer as it is referenced in:\n- Quote Q-1\n- Invoice INV-1"
    )
    # nothing was deleted
    assert CustomersRepo(conn).get_by_id(customer.id) is not None


def test_unreferenced_customer_is_deleted(conn, customer):
    repo = CustomersRepo(conn)
    assert repo.delete(customer.id) is True
    assert repo.get_by_id(customer.id) is None
    assert repo.delete(customer.id) is False


def test_foreign_key_failure_without_known_dependents(conn, customer):
    """A raw FOREIGN KEY failure with nothing to list becomes a generic conflict."""
    QuotesRepo(conn).create({"number": "Q-1", "date": "2025-06-01",
                             "customer_id": customer.id, "items": []})
    guard = ReferenceGuard(conn, "Customer", dependents=())

    def action():
        with conn:
            conn.execute("DELETE FROM customers WHERE id = ?", (customer.id,))

    with pytest.raises(ConflictError) as exc:
        guard.delete(customer.id, action)
    assert not isinstance(exc.value, ReferenceConflictError)
    assert exc.value.message == "Cannot delete Customer as it is referenced in other records"


def test_foreign_key_failure_rechecks_references(conn, customer, monkeypatch):
    """If the pre-check misses a reference, the re-check after the failure reports it."""
    QuotesRepo(conn).create({"number": "Q-9", "date": "2025-06-01",
                             "customer_id": customer.id, "items": []})
    repo = CustomersRepo(conn)
    monkeypatch.setattr(repo.guard, "ensure_deletable", lambda record_id: None)

    with pytest.raises(ReferenceConflictError) as exc:
        repo.delete(customer.id)
    assert exc.value.references == [Reference("Quote", "Q-9")]


def test_other_integrity_errors_propagate(conn):
    guard = ReferenceGuard(conn, "Thing", dependents=())

    def action():
        raise sqlite3.IntegrityError("NOT NULL constraint failed: things.name")

    with pytest.raises(sqlite3.IntegrityError):
        guard.delete("x", action)
