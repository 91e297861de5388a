"""Admin dashboard queries over orders and the sales projections."""

from datetime import date, timedelta

from protean.utils.globals import current_domain

from bookstore.ordering.order import Order, OrderStatus
from bookstore.projections.book_sales import BookSales
from bookstore.projections.daily_sales_stats import DailySalesStats


def order_status_breakdown() -> dict[str, int]:
    """Number of orders in each status, every status present."""
    repo = current_domain.repository_for(Order)
    return {status.value: repo.count_by_status(status.value) for status in OrderStatus}


def order_summary() -> dict[str, int]:
    breakdown = order_status_breakdown()
    return {
        "total": sum(breakdown.values()),
        "pending": breakdown[OrderStatus.PENDING.value],
        "fulfilled": breakdown[OrderStatus.FULFILLED.value],
        "cancelled": breakdown[OrderStatus.CANCELLED.value],
    }


def sales_for_period(days: int = 30, today: date | None = None) -> dict:
    """Daily rows for the last ``days`` days (today included), oldest first, plus totals."""
    days = max(int(days), 1)
    today = today or date.today()
    start = (today - timedelta(days=days - 1)).isoformat()

    rows = (
        current_domain.repository_for(DailySalesStats)
        ._dao.query.filter(date__gte=start, date__lte=today.isoformat())
        .order_by("date")
        .limit(days)
        .all()
        .items
    )
    return {
        "days": [
            {
                "date": row.date,
                "orders_placed": row.orders_placed,
                "orders_fulfilled": row.orders_fulfilled,
                "orders_cancelled": row.orders_cancelled,
                "revenue": row.revenue,
            }
            for row in rows
        ],
        "total_revenue": round(sum(row.revenue or 0.0 for row in rows), 2),
        "total_orders_fulfilled": sum(row.orders_fulfilled or 0 for row in rows),
    }


def top_bestsellers(limit: int = 10) -> list[BookSales]:
    limit = max(int(limit), 1)
    return list(
        current_domain.repository_for(BookSales)
        ._dao.query.order_by("-quantity_sold")
        .limit(limit)
        .all()
        .items
    )
