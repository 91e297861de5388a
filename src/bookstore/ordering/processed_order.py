"""ProcessedOrder: the record that an order was handed over."""

from datetime import datetime

from protean.fields import DateTime, Identifier

from bookstore.domain import bookstore


@bookstore.aggregate
class ProcessedOrder:
    """Exists once per fulfilled order.

    ``order_id`` is unique, so a second fulfillment of the same order cannot
    commit even when two staff members race on the claim code.
    """

    order_id: Identifier(required=True, unique=True)
    staff_id: Identifier(required=True)
    processed_at: DateTime(default=datetime.now)


@bookstore.repository(part_of=ProcessedOrder)
class ProcessedOrderRepository:
    def find_by_order_id(self, order_id) -> ProcessedOrder | None:
        return self._dao.query.filter(order_id=str(order_id)).all().first
