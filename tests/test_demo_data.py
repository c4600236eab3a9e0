from imanage.database.repositories import DashboardRepo, VehicleTransactionsRepo
from imanage.database.seeders.demo_data import populate


def test_populate_creates_consistent_data(conn, today):
    counts = populate(conn, months=3, today=today)
    assert counts["vehicles"] == 3
    assert counts["vehicle_transactions"] == 3 * 3 * 2 + 3
    assert conn.execute("SELECT COUNT(*) FROM vehicle_transactions").fetchone()[0] == \
        counts["vehicle_transactions"]

    metrics = DashboardRepo(conn).get_dashboard_metrics(today)
    assert metrics["overall"]["total_transactions"] == counts["vehicle_transactions"]
    assert metrics["customer_based"]["total_unique"] == 3
    assert VehicleTransactionsRepo(conn).get_all()
