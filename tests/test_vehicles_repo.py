import pytest

from imanage.database.repositories import InvoicesRepo, QuotesRepo, VehiclesRepo
from imanage.errors import ReferenceConflictError, ValidationError


def test_vehicle_number_required_and_unique(conn, vehicle):
    repo = VehiclesRepo(conn)
    assert vehicle.status == "active"
    with pytest.raises(ValidationError, match="Vehicle Number is required"):
        repo.create({"vehicle_type": "Truck"})
    with pytest.raises(ValidationError, match='Vehicle Number "DXB-10231" already exists'):
        repo.create({"vehicle_number": " DXB-10231 "})
    assert repo.get_by_number("DXB-10231").id == vehicle.id


def test_delete_cascades_to_transactions(conn, vehicle, transactions, today):
    transactions.create({"vehicle_id": vehicle.id, "transaction_type": "expense",
                         "category": "Fuel", "amount": 120, "date": today.isoformat()})
    assert VehiclesRepo(conn).delete(vehicle.id) is True
    assert conn.execute("SELECT COUNT(*) FROM vehicle_transactions").fetchone()[0] == 0


def test_delete_blocked_by_document_line_items(conn, vehicle, customer, line):
    item = line(vehicle_type_id=vehicle.id, vehicle_number=vehicle.vehicle_number)
    QuotesRepo(conn).create({"number": "Q-1", "date": "2025-06-01",
                             "customer_id": customer.id, "items": [item, item]})
    InvoicesRepo(conn).create({"number": "INV-1", "date": "2025-06-01",
                               "customer_id": customer.id, "items": [item]})
    with pytest.raises(ReferenceConflictError) as exc:
        VehiclesRepo(conn).delete(vehicle.id)
    # one reference per document, not per line
    assert [str(r) for r in exc.value.references] == ["Quote Q-1", "Invoice INV-1"]
