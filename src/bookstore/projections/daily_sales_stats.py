"""Daily sales stats projection for the admin dashboard.

One row per calendar day (YYYY-MM-DD). Placements and cancellations are
counted on the day they happen; revenue is booked on the day an order is
fulfilled, at the order's discounted total.
"""

import structlog
from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from bookstore.domain import bookstore
from bookstore.ordering.events import OrderCancelled, OrderFulfilled, OrderPlaced
from bookstore.ordering.order import Order

logger = structlog.get_logger(__name__)


@bookstore.projection
class DailySalesStats:
    date = String(identifier=True, required=True, max_length=10)  # YYYY-MM-DD
    orders_placed = Integer(default=0)
    orders_fulfilled = Integer(default=0)
    orders_cancelled = Integer(default=0)
    revenue = Float(default=0.0)


def _get_or_create(date_key):
    repo = current_domain.repository_for(DailySalesStats)
    try:
        return repo.get(date_key)
    except ObjectNotFoundError:
        return DailySalesStats(
            date=date_key,
            orders_placed=0,
            orders_fulfilled=0,
            orders_cancelled=0,
            revenue=0.0,
        )


def _record(moment, placed=0, fulfilled=0, cancelled=0, revenue=0.0) -> None:
    """Add the given counts to the day of ``moment``.

    Runs after the order change has committed; a failure is logged, not raised.
    """
    try:
        date_key = moment.date().isoformat()
        record = _get_or_create(date_key)
        record.orders_placed = (record.orders_placed or 0) + placed
        record.orders_fulfilled = (record.orders_fulfilled or 0) + fulfilled
        record.orders_cancelled = (record.orders_cancelled or 0) + cancelled
        record.revenue = round((record.revenue or 0.0) + revenue, 2)
        current_domain.repository_for(DailySalesStats).add(record)
    except Exception:
        logger.exception("Failed to update daily sales stats", moment=str(moment))


@bookstore.projector(projector_for=DailySalesStats, aggregates=[Order])
class DailySalesStatsProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        _record(event.placed_at, placed=1)

    @on(OrderFulfilled)
    def on_order_fulfilled(self, event):
        _record(event.fulfilled_at, fulfilled=1, revenue=event.total_price or 0.0)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        _record(event.cancelled_at, cancelled=1)
