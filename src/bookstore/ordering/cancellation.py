"""Member-initiated order cancellation: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from bookstore.domain import bookstore
from bookstore.exceptions import NotFoundError
from bookstore.ordering.order import Order

logger = structlog.get_logger(__name__)


@bookstore.command(part_of="Order")
class CancelOrder:
    order_id: Identifier(required=True)
    member_id: Identifier(required=True)


@bookstore.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            order = None

        # Someone else's order is reported exactly like a missing one
        if order is None or str(order.member_id) != str(command.member_id):
            raise NotFoundError({"order": [f"Order {command.order_id} not found"]})

        order.cancel()
        repo.add(order)
        logger.info("Order cancelled", order_id=str(order.id), member_id=str(order.member_id))


def cancel_order(order_id, member_id) -> Order:
    current_domain.process(CancelOrder(order_id=str(order_id), member_id=str(member_id)), asynchronous=False)
    return current_domain.repository_for(Order).get(str(order_id))
