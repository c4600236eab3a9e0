from datetime import date, timedelta

import pytest

from imanage.database.repositories import InvoicesRepo, VehicleTransactionsRepo
from imanage.errors import NotFoundError, ReferenceConflictError, ValidationError


def _tx(vehicle, **changes):
    data = {"vehicle_id": vehicle.id, "transaction_type": "revenue", "category": "Rental Income",
            "amount": 1500, "date": "2025-06-10"}
    data.update(changes)
    return data


def test_create_derives_month(transactions, vehicle):
    tx = transactions.create(_tx(vehicle))
    assert tx.month == "2025-06"
    assert tx.amount == pytest.approx(1500.0)


@pytest.mark.parametrize("changes, message", [
    ({"amount": 0}, "Transaction amount must be greater than 0"),
    ({"amount": "abc"}, "Transaction amount must be greater than 0"),
    ({"transaction_type": "refund"}, "Transaction type must be 'expense' or 'revenue'"),
    ({"date": "2025-06-16"}, "Transaction date cannot be in the future"),
    ({"date": "2024-06-14"}, "Transaction date cannot be more than 12 months in the past"),
    ({"date": "not-a-date"}, 'Invalid transaction date "not-a-date"'),
    ({"vehicle_id": None}, "Vehicle is required for transaction"),
    ({"vehicle_id": "ghost"}, 'Vehicle with ID "ghost" does not exist'),
])
def test_validation(transactions, vehicle, changes, message):
    with pytest.raises(ValidationError) as exc:
        transactions.create(_tx(vehicle, **changes))
    assert exc.value.message == message


def test_boundaries_are_inclusive(transactions, vehicle, today):
    transactions.create(_tx(vehicle, date=today.isoformat()))
    transactions.create(_tx(vehicle, date="2024-06-15"))
    assert len(transactions.get_by_vehicle_id(vehicle.id)) == 2


def test_nested_vehicle_reference(transactions, vehicle):
    data = _tx(vehicle)
    del data["vehicle_id"]
    data["vehicle"] = {"id": vehicle.id}
    assert transactions.create(data).vehicle_id == vehicle.id


def test_update_merges_and_follows_date(transactions, vehicle, today):
    tx = transactions.create(_tx(vehicle, description="May rental", date="2025-05-20"))
    updated = transactions.update(tx.id, {"date": (today - timedelta(days=1)).isoformat()})
    assert updated.month == "2025-06"
    assert updated.description == "May rental"
    assert updated.amount == pytest.approx(1500.0)
    with pytest.raises(NotFoundError, match='Transaction with ID "nope" does not exist'):
        transactions.update("nope", {"amount": 5})


def test_aged_transaction_keeps_editable_without_date_change(conn, transactions, vehicle):
    """A row that has aged out of the window can still be edited if its date stays."""
    tx = transactions.create(_tx(vehicle, date="2024-06-20", category="Maintenance",
                                 transaction_type="expense"))
    later = VehicleTransactionsRepo(conn, today=lambda: date(2025, 7, 1))
    updated = later.update(tx.id, {"description": "tyres x4"})
    assert updated.description == "tyres x4"
    assert updated.date == "2024-06-20"
    with pytest.raises(ValidationError, match="more than 12 months"):
        later.update(tx.id, {"date": "2024-06-21"})


def test_queries_by_vehicle_and_month(transactions, vehicle):
    transactions.create(_tx(vehicle, date="2025-05-02"))
    transactions.create(_tx(vehicle, date="2025-06-01"))
    transactions.create(_tx(vehicle, date="2025-06-09", transaction_type="expense", category="Fuel"))
    by_vehicle = transactions.get_by_vehicle_id(vehicle.id)
    assert [t.date for t in by_vehicle] == ["2025-06-09", "2025-06-01", "2025-05-02"]
    june = transactions.get_by_vehicle_id_and_month(vehicle.id, "2025-6")
    assert {t.date for t in june} == {"2025-06-01", "2025-06-09"}
    assert transactions.get_by_vehicle_id("other") == []


def test_invoice_linked_to_transaction_cannot_be_deleted(conn, transactions, vehicle, customer):
    inv = InvoicesRepo(conn).create({"number": "INV-9", "date": "2025-06-01",
                                     "customer_id": customer.id})
    transactions.create(_tx(vehicle, invoice_id=inv.id, description="Invoice INV-9"))
    with pytest.raises(ReferenceConflictError,
                       match="Cannot delete Invoice as it is referenced in Vehicle Transaction Invoice INV-9"):
        InvoicesRepo(conn).delete(inv.id)
