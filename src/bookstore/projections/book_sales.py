"""Per-book sales totals, fed by fulfilled orders.

Revenue is the snapshot unit price times quantity, before any order-level
discount.
"""

import json

import structlog
from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from bookstore.domain import bookstore
from bookstore.ordering.events import OrderFulfilled
from bookstore.ordering.order import Order

logger = structlog.get_logger(__name__)


@bookstore.projection
class BookSales:
    book_id = Identifier(identifier=True, required=True)
    title = String(max_length=255)
    quantity_sold = Integer(default=0)
    revenue = Float(default=0.0)


@bookstore.projector(projector_for=BookSales, aggregates=[Order])
class BookSalesProjector:
    @on(OrderFulfilled)
    def on_order_fulfilled(self, event):
        try:
            items = json.loads(event.items) if isinstance(event.items, str) else event.items
        except (TypeError, ValueError):
            logger.exception("Unreadable items on fulfilled order", order_id=str(event.order_id))
            return

        for item in items or []:
            try:
                _add_sale(item)
            except Exception:
                logger.exception(
                    "Failed to update book sales",
                    order_id=str(event.order_id),
                    book_id=str(item.get("book_id")),
                )


def _add_sale(item) -> None:
    repo = current_domain.repository_for(BookSales)
    try:
        record = repo.get(item["book_id"])
    except ObjectNotFoundError:
        record = BookSales(book_id=item["book_id"], title=item["title"], quantity_sold=0, revenue=0.0)

    record.title = item["title"]
    record.quantity_sold = (record.quantity_sold or 0) + item["quantity"]
    record.revenue = round((record.revenue or 0.0) + item["unit_price"] * item["quantity"], 2)
    repo.add(record)
