"""Order listings for members and staff."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from bookstore.exceptions import NotFoundError
from bookstore.ordering.order import Order, OrderStatus


@dataclass
class OrderPage:
    orders: list
    total: int
    page: int
    page_size: int


def get_member_order(order_id, member_id) -> Order:
    """Fetch one order, visible only to the member who placed it."""
    try:
        order = current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        order = None
    if order is None or str(order.member_id) != str(member_id):
        raise NotFoundError({"order": [f"Order {order_id} not found"]})
    return order


def list_member_orders(member_id, page: int = 1, page_size: int = 20) -> OrderPage:
    """A member's orders, newest first."""
    page, page_size = max(page, 1), max(page_size, 1)
    results = (
        current_domain.repository_for(Order)
        ._dao.query.filter(member_id=str(member_id))
        .order_by("-placed_at")
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return OrderPage(orders=list(results.items), total=results.total, page=page, page_size=page_size)


def list_fulfilled_orders(page: int = 1, page_size: int = 20) -> OrderPage:
    """Fulfilled orders for the staff desk, most recently fulfilled first."""
    page, page_size = max(page, 1), max(page_size, 1)
    results = (
        current_domain.repository_for(Order)
        ._dao.query.filter(status=OrderStatus.FULFILLED.value)
        .order_by("-fulfilled_at")
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return OrderPage(orders=list(results.items), total=results.total, page=page, page_size=page_size)
