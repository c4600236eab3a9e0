# imanage/database/repositories/dashboard_repo.py
from __future__ import annotations

from collections import defaultdict
from datetime import date
import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from ...constants import (
    DEFAULT_EXPENSE_CATEGORY,
    DEFAULT_REVENUE_CATEGORY,
    TOP_N,
    TREND_MONTHS,
)
from ...utils.helpers import month_key, normalize_month, shift_month, trailing_months
from ...utils.loggers import get_logger

_log = get_logger(__name__)


def _to_float(x: Optional[Any]) -> float:
    try:
        return float(x or 0.0)
    except (TypeError, ValueError):
        return 0.0


def _growth(current: float, previous: float, *, signed: bool = False) -> float:
    """Month-over-month growth in percent; 0 when the prior period is 0."""
    if previous == 0:
        return 0.0
    base = abs(previous) if signed else previous
    return (current - previous) / base * 100.0


def _period(month: str, revenue: float = 0.0, expenses: float = 0.0) -> dict:
    return {"month": month, "revenue": revenue, "expenses": expenses, "profit": revenue - expenses}


def empty_dashboard_metrics(today: Optional[date] = None) -> dict:
    """Zero-valued metrics with the same shape as a successful run."""
    today = today or date.today()
    current = month_key(today.year, today.month)
    last = month_key(*shift_month(today.year, today.month, -1))
    return {
        "overall": {
            "total_revenue": 0.0,
            "total_expenses": 0.0,
            "net_profit": 0.0,
            "profit_margin": 0.0,
            "avg_revenue_per_vehicle": 0.0,
            "avg_profit_per_vehicle": 0.0,
            "total_transactions": 0,
            "avg_transaction_value": 0.0,
        },
        "time_based": {
            "current_month": _period(current),
            "last_month": _period(last),
            "mom_growth": {"revenue": 0.0, "expenses": 0.0, "profit": 0.0},
            "ytd": {"revenue": 0.0, "expenses": 0.0, "profit": 0.0},
            "monthly_trend": [_period(m) for m in trailing_months(today, TREND_MONTHS)],
        },
        "vehicle_based": {
            "total_active": 0,
            "profitable": 0,
            "loss_making": 0,
            "no_data": 0,
            "top_by_revenue": [],
            "top_by_profit": [],
            "bottom_by_profit": [],
        },
        "customer_based": {
            "total_unique": 0,
            "top_by_revenue": [],
            "avg_revenue_per_customer": 0.0,
        },
        "category_based": {
            "revenue_by_category": {},
            "expenses_by_category": {},
            "top_expense_category": "N/A",
        },
        "operational": {
            "revenue_per_vehicle_per_month": 0.0,
            "expense_ratio": 0.0,
            "most_active_vehicle": {"vehicle_id": "", "vehicle_number": "N/A", "transaction_count": 0},
            "avg_transactions_per_vehicle": 0.0,
        },
    }


def _month_summary(month: str, revenue: float = 0.0, expenses: float = 0.0, count: int = 0) -> dict:
    return {
        "month": month,
        "total_revenue": revenue,
        "total_expenses": expenses,
        "profit": revenue - expenses,
        "transaction_count": count,
    }


def empty_profitability(vehicle_id: str, vehicle_number: Optional[str], today: Optional[date] = None) -> dict:
    """Zero-valued per-vehicle profitability, 12 trailing months included."""
    today = today or date.today()
    current = month_key(today.year, today.month)
    last = month_key(*shift_month(today.year, today.month, -1))
    return {
        "vehicle_id": vehicle_id,
        "vehicle_number": vehicle_number,
        "current_month": _month_summary(current),
        "last_month": _month_summary(last),
        "months": [_month_summary(m) for m in trailing_months(today, TREND_MONTHS)],
        "history": [],
        "all_time_revenue": 0.0,
        "all_time_expenses": 0.0,
        "all_time_profit": 0.0,
    }


class DashboardRepo:
    """
    Vehicle-finance reporting.

    Transactions are loaded once and aggregated in memory. Every month key is
    normalized to zero-padded YYYY-MM before grouping, so '2025-3' and
    '2025-03' land in the same bucket. Trend windows are generated explicitly
    (trailing 12 calendar months ending at `today`) and zero-filled.

    get_dashboard_metrics never raises: on any failure it logs the error and
    returns empty_dashboard_metrics().
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ----------------------------- Helpers -----------------------------

    def _rows(self, sql: str, params: tuple = ()) -> List[dict]:
        return [dict(r) for r in self.conn.execute(sql, params).fetchall()]

    def _transactions(self, vehicle_id: Optional[str] = None) -> List[dict]:
        sql = """
            SELECT t.id, t.vehicle_id, t.transaction_type, t.category,
                   CAST(t.amount AS REAL) AS amount, t.date, t.month, t.invoice_id,
                   i.customer_id AS customer_id
            FROM vehicle_transactions t
            LEFT JOIN invoices i ON i.id = t.invoice_id
        """
        params: tuple = ()
        if vehicle_id is not None:
            sql += " WHERE t.vehicle_id = ?"
            params = (vehicle_id,)
        txs = self._rows(sql, params)
        for tx in txs:
            tx["amount"] = _to_float(tx["amount"])
            tx["month"] = normalize_month(tx["month"], tx["date"])
        return txs

    @staticmethod
    def _split(txs: Iterable[dict]) -> tuple[float, float]:
        revenue = expenses = 0.0
        for tx in txs:
            if tx["transaction_type"] == "revenue":
                revenue += tx["amount"]
            elif tx["transaction_type"] == "expense":
                expenses += tx["amount"]
        return revenue, expenses

    @classmethod
    def _by_month(cls, txs: Iterable[dict]) -> Dict[str, List[dict]]:
        grouped: Dict[str, List[dict]] = defaultdict(list)
        for tx in txs:
            grouped[tx["month"]].append(tx)
        return grouped

    # ----------------------------- Per vehicle -----------------------------

    def get_profitability_by_vehicle(self, vehicle_id: str, today: Optional[date] = None) -> Optional[dict]:
        """
        Monthly revenue / expenses / profit for one vehicle, or None if the
        vehicle does not exist. Like the dashboard, a failure while
        aggregating is logged and answered with empty_profitability().
        """
        vehicle = self.conn.execute(
            "SELECT id, vehicle_number FROM vehicles WHERE id = ?", (vehicle_id,)
        ).fetchone()
        if vehicle is None:
            return None

        today = today or date.today()
        try:
            return self._profitability(vehicle["id"], vehicle["vehicle_number"], today)
        except Exception:
            _log.exception("Profitability for vehicle %s failed; returning empty result", vehicle_id)
            return empty_profitability(vehicle["id"], vehicle["vehicle_number"], today)

    def _profitability(self, vehicle_id: str, vehicle_number: str, today: date) -> dict:
        txs = self._transactions(vehicle_id)
        grouped = self._by_month(txs)

        def summary(month: str) -> dict:
            bucket = grouped.get(month, [])
            revenue, expenses = self._split(bucket)
            return _month_summary(month, revenue, expenses, len(bucket))

        current = month_key(today.year, today.month)
        last = month_key(*shift_month(today.year, today.month, -1))
        revenue, expenses = self._split(txs)
        return {
            "vehicle_id": vehicle_id,
            "vehicle_number": vehicle_number,
            "current_month": summary(current),
            "last_month": summary(last),
            "months": [summary(m) for m in trailing_months(today, TREND_MONTHS)],
            "history": [summary(m) for m in sorted(grouped)],
            "all_time_revenue": revenue,
            "all_time_expenses": expenses,
            "all_time_profit": revenue - expenses,
        }

    # ----------------------------- Dashboard -----------------------------

    def get_dashboard_metrics(self, today: Optional[date] = None) -> dict:
        today = today or date.today()
        try:
            return self._dashboard_metrics(today)
        except Exception:
            _log.exception("Dashboard metrics failed; returning empty metrics")
            return empty_dashboard_metrics(today)

    def _dashboard_metrics(self, today: date) -> dict:
        txs = self._transactions()
        vehicles = self._rows("SELECT id, vehicle_number FROM vehicles ORDER BY vehicle_number")
        numbers = {v["id"]: v["vehicle_number"] for v in vehicles}
        metrics = empty_dashboard_metrics(today)

        # ---- Overall ----
        total_revenue, total_expenses = self._split(txs)
        net_profit = total_revenue - total_expenses
        per_vehicle: Dict[str, List[dict]] = defaultdict(list)
        for tx in txs:
            per_vehicle[tx["vehicle_id"]].append(tx)
        with_data = [v for v in vehicles if per_vehicle.get(v["id"])]
        n_with_data = len(with_data)
        total_transactions = len(txs)

        metrics["overall"].update(
            total_revenue=total_revenue,
            total_expenses=total_expenses,
            net_profit=net_profit,
            profit_margin=(net_profit / total_revenue * 100.0) if total_revenue > 0 else 0.0,
            avg_revenue_per_vehicle=total_revenue / n_with_data if n_with_data else 0.0,
            avg_profit_per_vehicle=net_profit / n_with_data if n_with_data else 0.0,
            total_transactions=total_transactions,
            avg_transaction_value=(
                (total_revenue + total_expenses) / total_transactions if total_transactions else 0.0
            ),
        )

        # ---- Time based ----
        grouped = self._by_month(txs)
        time_based = metrics["time_based"]
        trend = []
        for month in trailing_months(today, TREND_MONTHS):
            trend.append(_period(month, *self._split(grouped.get(month, []))))
        time_based["monthly_trend"] = trend

        current = time_based["current_month"]["month"]
        last = time_based["last_month"]["month"]
        cur = _period(current, *self._split(grouped.get(current, [])))
        prev = _period(last, *self._split(grouped.get(last, [])))
        time_based["current_month"] = cur
        time_based["last_month"] = prev
        time_based["mom_growth"] = {
            "revenue": _growth(cur["revenue"], prev["revenue"]),
            "expenses": _growth(cur["expenses"], prev["expenses"]),
            "profit": _growth(cur["profit"], prev["profit"], signed=True),
        }
        year_prefix = f"{today.year:04d}-"
        ytd_revenue, ytd_expenses = self._split(t for t in txs if t["month"].startswith(year_prefix))
        time_based["ytd"] = {
            "revenue": ytd_revenue,
            "expenses": ytd_expenses,
            "profit": ytd_revenue - ytd_expenses,
        }

        # ---- Vehicle based ----
        rows = []
        for v in vehicles:
            revenue, expenses = self._split(per_vehicle.get(v["id"], []))
            rows.append({
                "vehicle_id": v["id"],
                "vehicle_number": v["vehicle_number"],
                "revenue": revenue,
                "profit": revenue - expenses,
                "transaction_count": len(per_vehicle.get(v["id"], [])),
            })

        def pick(key: str, reverse: bool) -> List[dict]:
            ranked = sorted(rows, key=lambda r: r[key], reverse=reverse)[:TOP_N]
            return [
                {"vehicle_id": r["vehicle_id"], "vehicle_number": r["vehicle_number"], key: r[key]}
                for r in ranked
            ]

        metrics["vehicle_based"].update(
            total_active=n_with_data,
            profitable=sum(1 for r in rows if r["profit"] > 0),
            loss_making=sum(1 for r in rows if r["profit"] < 0),
            no_data=len(vehicles) - n_with_data,
            top_by_revenue=pick("revenue", True),
            top_by_profit=pick("profit", True),
            bottom_by_profit=pick("profit", False),
        )

        # ---- Customer based (transaction -> invoice -> customer) ----
        customer_revenue: Dict[str, float] = defaultdict(float)
        for tx in txs:
            if tx["transaction_type"] == "revenue" and tx["customer_id"]:
                customer_revenue[tx["customer_id"]] += tx["amount"]
        names = {
            r["id"]: r["name"] for r in self._rows("SELECT id, name FROM customers")
        }
        top_customers = sorted(customer_revenue.items(), key=lambda kv: kv[1], reverse=True)[:TOP_N]
        metrics["customer_based"].update(
            total_unique=len(customer_revenue),
            top_by_revenue=[
                {"customer_id": cid, "customer_name": names.get(cid, "Unknown"), "revenue": rev}
                for cid, rev in top_customers
            ],
            avg_revenue_per_customer=(
                sum(customer_revenue.values()) / len(customer_revenue) if customer_revenue else 0.0
            ),
        )

        # ---- Category based ----
        revenue_by_category: Dict[str, float] = defaultdict(float)
        expenses_by_category: Dict[str, float] = defaultdict(float)
        for tx in txs:
            if tx["transaction_type"] == "revenue":
                revenue_by_category[tx["category"] or DEFAULT_REVENUE_CATEGORY] += tx["amount"]
            else:
                expenses_by_category[tx["category"] or DEFAULT_EXPENSE_CATEGORY] += tx["amount"]
        top_expense = max(expenses_by_category.items(), key=lambda kv: kv[1], default=None)
        metrics["category_based"].update(
            revenue_by_category=dict(revenue_by_category),
            expenses_by_category=dict(expenses_by_category),
            top_expense_category=top_expense[0] if top_expense else "N/A",
        )

        # ---- Operational ----
        trend_revenue = sum(m["revenue"] for m in trend)
        active = [r for r in rows if r["transaction_count"] > 0]
        operational = metrics["operational"]
        operational.update(
            revenue_per_vehicle_per_month=(
                trend_revenue / (n_with_data * len(trend)) if n_with_data and trend else 0.0
            ),
            expense_ratio=(total_expenses / total_revenue * 100.0) if total_revenue > 0 else 0.0,
            avg_transactions_per_vehicle=total_transactions / n_with_data if n_with_data else 0.0,
        )
        if active:
            busiest = max(active, key=lambda r: r["transaction_count"])
            operational["most_active_vehicle"] = {
                "vehicle_id": busiest["vehicle_id"],
                "vehicle_number": busiest["vehicle_number"] or numbers.get(busiest["vehicle_id"], "Unknown"),
                "transaction_count": busiest["transaction_count"],
            }
        return metrics
