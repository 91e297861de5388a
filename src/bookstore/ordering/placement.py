"""Order placement: command, handler and the ``place_order`` entry point."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from bookstore.book.book import Book
from bookstore.domain import bookstore
from bookstore.exceptions import InvalidItemError, NotFoundError
from bookstore.member.member import Member
from bookstore.ordering.discount import DiscountPolicy
from bookstore.ordering.order import Order

logger = structlog.get_logger(__name__)


@bookstore.command(part_of="Order")
class PlaceOrder:
    member_id: Identifier(required=True)
    items: Text(required=True)  # JSON: list of {"book_id", "quantity"}


def _whole_number(value):
    """Return ``value`` as an int, or ``None`` if it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def merge_lines(items) -> dict:
    """Collapse requested items into ``{book_id: quantity}``, summing repeats.

    Insertion order follows the first occurrence of each book.
    """
    if not items:
        raise InvalidItemError({"items": ["An order needs at least one item"]})

    merged = {}
    for item in items:
        book_id = item.get("book_id") if isinstance(item, dict) else None
        if not book_id:
            raise InvalidItemError({"items": ["Every item needs a book_id"]})

        quantity = _whole_number(item.get("quantity"))
        if quantity is None:
            raise InvalidItemError({"items": [f"Quantity for book {book_id} must be a whole number"]})
        if quantity <= 0:
            raise InvalidItemError({"items": [f"Quantity for book {book_id} must be positive"]})

        merged[str(book_id)] = merged.get(str(book_id), 0) + quantity
    return merged


def build_order(member_id, items) -> Order:
    """Validate ``items`` for the member, price them and persist a new Order.

    Runs inside the caller's unit of work. Nothing is reserved; stock is only
    checked here and deducted at fulfillment.
    """
    try:
        member = current_domain.repository_for(Member).get(member_id)
    except ObjectNotFoundError:
        raise NotFoundError({"member": [f"Member {member_id} does not exist"]}) from None

    requested = merge_lines(items)
    books = current_domain.repository_for(Book).find_many(requested.keys())

    lines = []
    for book_id, quantity in requested.items():
        book = books.get(book_id)
        if book is None:
            raise InvalidItemError({"items": [f"Book {book_id} does not exist"]})
        if not book.is_available_in_library:
            raise InvalidItemError({"items": [f"{book.title} is not available for ordering"]})
        book.ensure_stock_for(quantity)
        lines.append((book_id, book.title, quantity, book.effective_price))

    original_total = sum(unit_price * quantity for _, _, quantity, unit_price in lines)
    discount = DiscountPolicy.from_config().calculate_order_discount(original_total, len(lines))

    order = Order.place(
        member_id=member.id,
        lines=lines,
        discount=discount,
        member_email=member.email.address,
        member_name=member.full_name,
    )
    current_domain.repository_for(Order).add(order)

    logger.info(
        "Order placed",
        order_id=str(order.id),
        member_id=str(member.id),
        item_count=len(lines),
        total_price=order.total_price,
    )
    return order


@bookstore.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items = json.loads(command.items) if isinstance(command.items, str) else command.items
        return str(build_order(command.member_id, items).id)


def place_order(member_id, items) -> Order:
    """Place an order and return it as persisted."""
    order_id = current_domain.process(
        PlaceOrder(member_id=str(member_id), items=json.dumps(list(items))),
        asynchronous=False,
    )
    return current_domain.repository_for(Order).get(order_id)
