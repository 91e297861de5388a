"""Staff fulfillment by claim code.

The handler checks every line against on-hand stock before touching any book,
then deducts stock, marks the order fulfilled and records a ``ProcessedOrder``,
all inside one unit of work. A concurrent writer on the same books makes the
commit fail with ``ExpectedVersionError``; ``fulfill_order`` retries the whole
command a bounded number of times.
"""

import structlog
from protean import handle
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt

from bookstore.book.book import Book
from bookstore.domain import bookstore
from bookstore.exceptions import AlreadyFulfilledError, NotFoundError, UnavailableError
from bookstore.ordering.order import Order, OrderStatus
from bookstore.ordering.processed_order import ProcessedOrder
from bookstore.utils.settings import setting

logger = structlog.get_logger(__name__)


@bookstore.command(part_of="Order")
class FulfillOrder:
    claim_code: String(required=True, max_length=36)
    staff_id: Identifier(required=True)


@bookstore.command_handler(part_of=Order)
class FulfillOrderHandler:
    @handle(FulfillOrder)
    def fulfill_order(self, command):
        claim_code = command.claim_code.strip()
        order_repo = current_domain.repository_for(Order)
        order = order_repo.find_by_claim_code(claim_code)
        if order is None or order.is_cancelled or order.status == OrderStatus.CANCELLED.value:
            raise NotFoundError({"claim_code": ["Order not found or has been cancelled."]})

        processed_repo = current_domain.repository_for(ProcessedOrder)
        if processed_repo.find_by_order_id(order.id) or order.status == OrderStatus.FULFILLED.value:
            raise AlreadyFulfilledError({"order": ["Order has already been fulfilled."]})

        book_repo = current_domain.repository_for(Book)
        books = book_repo.find_many(item.book_id for item in order.items)

        # Every line is checked before any stock moves
        for item in order.items:
            book = books.get(str(item.book_id))
            if book is None:
                raise NotFoundError({"book": [f"Book {item.book_id} no longer exists"]})
            book.ensure_stock_for(item.quantity)

        for item in order.items:
            books[str(item.book_id)].deduct_stock(item.quantity)
        for book in books.values():
            book_repo.add(book)

        order.mark_fulfilled(command.staff_id)
        order_repo.add(order)
        processed_repo.add(ProcessedOrder(order_id=order.id, staff_id=command.staff_id))

        logger.info(
            "Order fulfilled",
            order_id=str(order.id),
            claim_code=claim_code,
            staff_id=str(command.staff_id),
        )
        return f"Order #{order.id} fulfilled successfully."


def fulfill_order(claim_code: str, staff_id) -> str:
    """Run ``FulfillOrder``, retrying on version conflicts.

    Raises ``UnavailableError`` once the configured attempts are exhausted.
    """
    claim_code = (claim_code or "").strip()
    command = FulfillOrder(claim_code=claim_code, staff_id=str(staff_id))
    retryer = Retrying(
        stop=stop_after_attempt(int(setting("FULFILLMENT_MAX_ATTEMPTS"))),
        retry=retry_if_exception_type(ExpectedVersionError),
    )
    try:
        return retryer(current_domain.process, command, asynchronous=False)
    except RetryError as exc:
        logger.error(
            "Fulfillment gave up after repeated version conflicts",
            claim_code=claim_code,
            attempts=exc.last_attempt.attempt_number,
        )
        raise UnavailableError(
            {"order": [f"Could not fulfil order with claim code {claim_code}, please retry"]}
        ) from exc
