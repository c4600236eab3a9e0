import pytest

from imanage.database.repositories import InvoicesRepo, QuotesRepo
from imanage.errors import ValidationError


@pytest.fixture()
def repo(conn):
    return InvoicesRepo(conn)


@pytest.fixture()
def invoice(repo, customer, line):
    return repo.create({"number": "INV-1", "date": "2025-06-01", "customer_id": customer.id,
                        "items": [line(quantity=1, unit_price=1000, tax_percent=5)]})


def _payload(inv, **changes):
    data = {
        "number": inv.number, "date": inv.date, "customer_id": inv.customer_id,
        "items": [vars(it) for it in inv.items],
    }
    data.update(changes)
    return data


def test_create_defaults_and_totals(invoice):
    assert invoice.subtotal == pytest.approx(1000.0)
    assert invoice.tax == pytest.approx(50.0)
    assert invoice.total == pytest.approx(1050.0)
    assert invoice.status == "draft"
    assert invoice.amount_received == 0.0
    assert invoice.tax_override is None


def test_blank_optional_references_are_stored_as_null(repo, customer):
    inv = repo.create({"number": "INV-2", "date": "2025-06-01", "customer_id": customer.id,
                       "quote_id": "", "vendor_id": "  ", "due_date": ""})
    row = repo.conn.execute("SELECT quote_id, vendor_id, due_date FROM invoices WHERE id = ?",
                            (inv.id,)).fetchone()
    assert tuple(row) == (None, None, None)


def test_customer_required_and_status_checked(repo, customer):
    with pytest.raises(ValidationError, match="Customer is required for invoice"):
        repo.create({"number": "INV-3", "date": "2025-06-01"})
    with pytest.raises(ValidationError, match="Invalid invoice status"):
        repo.create({"number": "INV-3", "date": "2025-06-01", "customer_id": customer.id,
                     "status": "lost"})


def test_unknown_quote_reference_is_rejected(repo, customer):
    with pytest.raises(ValidationError, match='Quote with ID "q-x" does not exist'):
        repo.create({"number": "INV-4", "date": "2025-06-01", "customer_id": customer.id,
                     "quote_id": "q-x"})


def test_tax_override_replaces_computed_tax(repo, invoice):
    inv = repo.update(invoice.id, _payload(invoice, tax_override=30))
    assert inv.tax_override == pytest.approx(30.0)
    assert inv.tax == pytest.approx(30.0)
    assert inv.total == pytest.approx(1030.0)


def test_override_kept_when_items_unchanged(repo, invoice):
    inv = repo.update(invoice.id, _payload(invoice, tax_override=30))
    inv = repo.update(inv.id, _payload(inv, notes="paid by cheque"))
    assert inv.tax_override == pytest.approx(30.0)
    assert inv.total == pytest.approx(1030.0)


def test_override_cleared_when_items_change(repo, invoice, line):
    inv = repo.update(invoice.id, _payload(invoice, tax_override=30))
    inv = repo.update(inv.id, _payload(inv, items=[line(quantity=2, unit_price=1000, tax_percent=5)]))
    assert inv.tax_override is None
    assert inv.tax == pytest.approx(100.0)
    assert inv.total == pytest.approx(2100.0)


def test_override_cleared_by_explicit_null(repo, invoice):
    inv = repo.update(invoice.id, _payload(invoice, tax_override=30))
    inv = repo.update(inv.id, _payload(inv, tax_override=None))
    assert inv.tax_override is None
    assert inv.tax == pytest.approx(50.0)


def test_item_mutation_clears_override(repo, invoice, line):
    inv = repo.update(invoice.id, _payload(invoice, tax_override=30))
    inv = repo.add_item(inv.id, line(unit_price=100, tax_percent=0))
    assert inv.tax_override is None
    assert inv.total == pytest.approx(1150.0)


def test_negative_override_rejected(repo, customer):
    with pytest.raises(ValidationError, match="Tax override"):
        repo.create({"number": "INV-5", "date": "2025-06-01", "customer_id": customer.id,
                     "tax_override": -1})


def test_outstanding_balance(repo, invoice):
    inv = repo.update(invoice.id, _payload(invoice, amount_received=1000, status="invoice_sent"))
    assert repo.outstanding_balance(inv.id) == pytest.approx(50.0)
    assert repo.outstanding_balance("missing") is None


def test_quote_referenced_by_invoice_cannot_be_deleted(conn, repo, customer):
    quote = QuotesRepo(conn).create({"number": "Q-7", "date": "2025-06-01",
                                     "customer_id": customer.id})
    repo.create({"number": "INV-7", "date": "2025-06-01", "customer_id": customer.id,
                 "quote_id": quote.id})
    with pytest.raises(Exception, match="Cannot delete Quote as it is referenced in Invoice INV-7"):
        QuotesRepo(conn).delete(quote.id)
