"""Application tests for member-initiated cancellation."""

import pytest
from bookstore.exceptions import InvalidStateError, NotFoundError
from bookstore.ordering.cancellation import CancelOrder, cancel_order
from bookstore.ordering.fulfillment import fulfill_order
from bookstore.ordering.order import Order, OrderStatus
from bookstore.ordering.placement import place_order
from protean.utils.globals import current_domain


@pytest.fixture()
def pending_order(add_book, member_id):
    book = add_book(stock_quantity=4)
    return place_order(member_id, [{"book_id": book, "quantity": 1}])


class TestCancelOrder:
    def test_owner_cancels_pending_order(self, pending_order, member_id):
        cancelled = cancel_order(pending_order.id, member_id)
        assert cancelled.is_cancelled is True
        assert cancelled.status == OrderStatus.CANCELLED.value
        assert cancelled.cancelled_at is not None

    def test_cancel_via_command(self, pending_order, member_id):
        current_domain.process(CancelOrder(order_id=pending_order.id, member_id=member_id), asynchronous=False)
        assert current_domain.repository_for(Order).get(pending_order.id).is_cancelled is True

    def test_cancel_fulfilled_order_is_invalid(self, pending_order, member_id):
        fulfill_order(pending_order.claim_code, "staff-1")
        with pytest.raises(InvalidStateError):
            cancel_order(pending_order.id, member_id)
        reloaded = current_domain.repository_for(Order).get(pending_order.id)
        assert reloaded.status == OrderStatus.FULFILLED.value
        assert reloaded.is_cancelled is False

    def test_cancel_twice_is_invalid(self, pending_order, member_id):
        cancel_order(pending_order.id, member_id)
        with pytest.raises(InvalidStateError):
            cancel_order(pending_order.id, member_id)

    def test_other_member_cannot_cancel(self, pending_order, register_member):
        intruder = register_member()
        with pytest.raises(NotFoundError):
            cancel_order(pending_order.id, intruder)
        assert current_domain.repository_for(Order).get(pending_order.id).status == OrderStatus.PENDING.value

    def test_unknown_order(self, member_id):
        with pytest.raises(NotFoundError):
            cancel_order("no-such-order", member_id)
