import pytest

from imanage.database.repositories import (
    DashboardRepo,
    InvoicesRepo,
    VehiclesRepo,
    empty_dashboard_metrics,
    empty_profitability,
)


@pytest.fixture()
def fleet(conn, transactions, customer, vehicle):
    """
    Truck: revenue 1000 (Jun, invoiced), expense 300 Fuel (Jun), revenue 500 (May)
    Crane: expense 200 without category (Jun)
    Pickup: no transactions
    """
    vehicles = VehiclesRepo(conn)
    crane = vehicles.create({"vehicle_number": "DXB-44810", "vehicle_type": "Crane"})
    vehicles.create({"vehicle_number": "SHJ-7702", "vehicle_type": "Pickup"})
    inv = InvoicesRepo(conn).create({"number": "INV-1", "date": "2025-06-01",
                                     "customer_id": customer.id})

    def tx(vehicle_id, kind, amount, day, category=None, **extra):
        transactions.create({"vehicle_id": vehicle_id, "transaction_type": kind,
                             "amount": amount, "date": day, "category": category, **extra})

    tx(vehicle.id, "revenue", 1000, "2025-06-02", "Rental Income", invoice_id=inv.id)
    tx(vehicle.id, "expense", 300, "2025-06-03", "Fuel")
    tx(vehicle.id, "revenue", 500, "2025-05-10", "Rental Income")
    tx(crane.id, "expense", 200, "2025-06-04")
    return {"truck": vehicle, "crane": crane}


def test_empty_database_has_full_zero_structure(conn, today):
    m = DashboardRepo(conn).get_dashboard_metrics(today)
    assert m == empty_dashboard_metrics(today)
    trend = m["time_based"]["monthly_trend"]
    assert len(trend) == 12
    assert trend[0]["month"] == "2024-07"
    assert trend[-1]["month"] == "2025-06"
    assert m["operational"]["most_active_vehicle"]["vehicle_number"] == "N/A"
    assert m["category_based"]["top_expense_category"] == "N/A"


def test_overall_and_time_based(conn, fleet, today):
    m = DashboardRepo(conn).get_dashboard_metrics(today)
    overall = m["overall"]
    assert overall["total_revenue"] == pytest.approx(1500.0)
    assert overall["total_expenses"] == pytest.approx(500.0)
    assert overall["net_profit"] == pytest.approx(1000.0)
    assert overall["profit_margin"] == pytest.approx(1000 / 1500 * 100)
    assert overall["avg_revenue_per_vehicle"] == pytest.approx(750.0)
    assert overall["avg_profit_per_vehicle"] == pytest.approx(500.0)
    assert overall["total_transactions"] == 4
    assert overall["avg_transaction_value"] == pytest.approx(500.0)

    tb = m["time_based"]
    assert tb["current_month"] == {"month": "2025-06", "revenue": 1000.0,
                                   "expenses": 500.0, "profit": 500.0}
    assert tb["last_month"]["revenue"] == pytest.approx(500.0)
    assert tb["mom_growth"]["revenue"] == pytest.approx(100.0)
    # previous month had no expenses
    assert tb["mom_growth"]["expenses"] == 0.0
    assert tb["ytd"]["profit"] == pytest.approx(1000.0)
    assert sum(p["revenue"] for p in tb["monthly_trend"]) == pytest.approx(1500.0)


def test_vehicle_customer_category_operational(conn, fleet, customer, today):
    m = DashboardRepo(conn).get_dashboard_metrics(today)

    vb = m["vehicle_based"]
    assert (vb["total_active"], vb["profitable"], vb["loss_making"], vb["no_data"]) == (2, 1, 1, 1)
    assert vb["top_by_revenue"][0]["vehicle_number"] == "DXB-10231"
    assert vb["bottom_by_profit"][0]["vehicle_number"] == "DXB-44810"

    cb = m["customer_based"]
    assert cb["total_unique"] == 1
    assert cb["top_by_revenue"] == [{"customer_id": customer.id,
                                     "customer_name": customer.name, "revenue": 1000.0}]

    cat = m["category_based"]
    assert cat["revenue_by_category"] == {"Rental Income": 1500.0}
    assert cat["expenses_by_category"] == {"Fuel": 300.0, "Other": 200.0}
    assert cat["top_expense_category"] == "Fuel"

    op = m["operational"]
    assert op["most_active_vehicle"]["vehicle_number"] == "DXB-10231"
    assert op["most_active_vehicle"]["transaction_count"] == 3
    assert op["expense_ratio"] == pytest.approx(500 / 1500 * 100)
    assert op["avg_transactions_per_vehicle"] == pytest.approx(2.0)


def test_unpadded_month_keys_are_grouped(conn, vehicle, today):
    conn.executemany(
        "INSERT INTO vehicle_transactions(id, vehicle_id, transaction_type, amount, date, month) "
        "VALUES (?, ?, 'revenue', ?, ?, ?)",
        [("t1", vehicle.id, 100, "2025-03-05", "2025-3"),
         ("t2", vehicle.id, 50, "2025-03-20", "2025-03")],
    )
    conn.commit()
    trend = DashboardRepo(conn).get_dashboard_metrics(today)["time_based"]["monthly_trend"]
    march = [p for p in trend if p["month"] == "2025-03"]
    assert march == [{"month": "2025-03", "revenue": 150.0, "expenses": 0.0, "profit": 150.0}]
    assert not any(p["month"] == "2025-3" for p in trend)

    prof = DashboardRepo(conn).get_profitability_by_vehicle(vehicle.id, today)
    assert [h["month"] for h in prof["history"]] == ["2025-03"]
    assert prof["history"][0]["transaction_count"] == 2


def test_failure_returns_empty_metrics(conn, today, monkeypatch):
    repo = DashboardRepo(conn)

    def broken(_today):
        raise RuntimeError("boom")

    monkeypatch.setattr(repo, "_dashboard_metrics", broken)
    assert repo.get_dashboard_metrics(today) == empty_dashboard_metrics(today)


def test_profitability_by_vehicle(conn, fleet, today):
    repo = DashboardRepo(conn)
    p = repo.get_profitability_by_vehicle(fleet["truck"].id, today)
    assert p["vehicle_number"] == "DXB-10231"
    assert p["current_month"] == {"month": "2025-06", "total_revenue": 1000.0,
                                  "total_expenses": 300.0, "profit": 700.0,
                                  "transaction_count": 2}
    assert p["last_month"]["profit"] == pytest.approx(500.0)
    assert len(p["months"]) == 12
    assert [h["month"] for h in p["history"]] == ["2025-05", "2025-06"]
    assert p["all_time_profit"] == pytest.approx(1200.0)
    assert repo.get_profitability_by_vehicle("missing", today) is None


def test_profitability_failure_returns_zero_filled_months(conn, vehicle, today, monkeypatch):
    repo = DashboardRepo(conn)

    def broken(*_args):
        raise RuntimeError("boom")

    monkeypatch.setattr(repo, "_profitability", broken)
    p = repo.get_profitability_by_vehicle(vehicle.id, today)
    assert p == empty_profitability(vehicle.id, vehicle.vehicle_number, today)
    assert len(p["months"]) == 12
    assert p["months"][-1] == {"month": "2025-06", "total_revenue": 0.0, "total_expenses": 0.0,
                               "profit": 0.0, "transaction_count": 0}
    assert p["last_month"]["month"] == "2025-05"
