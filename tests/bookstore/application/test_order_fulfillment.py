"""Application tests for staff fulfillment by claim code."""

from unittest import mock

import pytest
from bookstore.book.book import Book
from bookstore.book.management import AdjustStock
from bookstore.book.repository import BookRepository
from bookstore.exceptions import AlreadyFulfilledError, InsufficientStockError, NotFoundError, UnavailableError
from bookstore.ordering.cancellation import cancel_order
from bookstore.ordering.fulfillment import FulfillOrder, fulfill_order
from bookstore.ordering.order import Order, OrderStatus
from bookstore.ordering.placement import place_order
from bookstore.ordering.processed_order import ProcessedOrder
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain


def _stock(book_id):
    return current_domain.repository_for(Book).get(book_id).stock_quantity


@pytest.fixture()
def two_book_order(add_book, member_id):
    book_a = add_book(title="Book A", stock_quantity=5)
    book_b = add_book(title="Book B", stock_quantity=5)
    order = place_order(member_id, [{"book_id": book_a, "quantity": 2}, {"book_id": book_b, "quantity": 1}])
    return order, book_a, book_b


class TestFulfillOrder:
    def test_fulfil_returns_message(self, two_book_order):
        order, _, _ = two_book_order
        message = fulfill_order(order.claim_code, "staff-1")
        assert message == f"Order #{order.id} fulfilled successfully."

    def test_fulfil_deducts_stock_and_counts_sales(self, two_book_order):
        order, book_a, book_b = two_book_order
        fulfill_order(order.claim_code, "staff-1")

        assert _stock(book_a) == 3
        assert _stock(book_b) == 4
        assert current_domain.repository_for(Book).get(book_a).units_sold == 2

    def test_fulfil_marks_order_and_records_processing(self, two_book_order):
        order, _, _ = two_book_order
        fulfill_order(order.claim_code, "staff-7")

        reloaded = current_domain.repository_for(Order).get(order.id)
        assert reloaded.status == OrderStatus.FULFILLED.value
        assert reloaded.fulfilled_by == "staff-7"

        processed = current_domain.repository_for(ProcessedOrder).find_by_order_id(order.id)
        assert processed is not None
        assert processed.staff_id == "staff-7"
        assert processed.processed_at is not None

    def test_command_through_domain(self, two_book_order):
        order, _, _ = two_book_order
        result = current_domain.process(
            FulfillOrder(claim_code=order.claim_code, staff_id="staff-1"),
            asynchronous=False,
        )
        assert result.endswith("fulfilled successfully.")

    def test_claim_code_surrounding_whitespace_ignored(self, two_book_order):
        order, _, _ = two_book_order
        fulfill_order(f"  {order.claim_code} ", "staff-1")
        assert current_domain.repository_for(Order).get(order.id).status == OrderStatus.FULFILLED.value


class TestFulfillOrderRejections:
    def test_unknown_claim_code(self, two_book_order):
        order, book_a, _ = two_book_order
        with pytest.raises(NotFoundError):
            fulfill_order("not-a-claim-code", "staff-1")
        assert _stock(book_a) == 5
        assert current_domain.repository_for(Order).get(order.id).status == OrderStatus.PENDING.value

    def test_second_fulfillment_rejected_and_stock_deducted_once(self, two_book_order):
        order, book_a, book_b = two_book_order
        fulfill_order(order.claim_code, "staff-1")

        with pytest.raises(AlreadyFulfilledError):
            fulfill_order(order.claim_code, "staff-2")

        assert _stock(book_a) == 3
        assert _stock(book_b) == 4
        assert current_domain.repository_for(ProcessedOrder)._dao.query.all().total == 1

    def test_cancelled_order_is_not_found(self, two_book_order, member_id):
        order, book_a, _ = two_book_order
        cancel_order(order.id, member_id)

        with pytest.raises(NotFoundError):
            fulfill_order(order.claim_code, "staff-1")
        assert _stock(book_a) == 5

    def test_one_short_line_deducts_nothing(self, two_book_order):
        order, book_a, book_b = two_book_order
        current_domain.process(AdjustStock(book_id=book_b, quantity_change=-5), asynchronous=False)

        with pytest.raises(InsufficientStockError) as exc:
            fulfill_order(order.claim_code, "staff-1")

        assert exc.value.title == "Book B"
        assert _stock(book_a) == 5
        assert _stock(book_b) == 0
        assert current_domain.repository_for(Order).get(order.id).status == OrderStatus.PENDING.value
        assert current_domain.repository_for(ProcessedOrder).find_by_order_id(order.id) is None


class TestVersionConflictRetry:
    def test_retries_after_version_conflict(self):
        with mock.patch("bookstore.ordering.fulfillment.current_domain", new_callable=mock.MagicMock) as domain:
            domain.process.side_effect = [ExpectedVersionError("stale book"), "Order #1 fulfilled successfully."]
            assert fulfill_order("code", "staff-1") == "Order #1 fulfilled successfully."
        assert domain.process.call_count == 2

    def test_gives_up_after_configured_attempts(self):
        with mock.patch("bookstore.ordering.fulfillment.current_domain", new_callable=mock.MagicMock) as domain:
            domain.process.side_effect = ExpectedVersionError("stale book")
            with pytest.raises(UnavailableError):
                fulfill_order("code", "staff-1")
        assert domain.process.call_count == 3

    def test_business_errors_are_not_retried(self):
        with mock.patch("bookstore.ordering.fulfillment.current_domain", new_callable=mock.MagicMock) as domain:
            domain.process.side_effect = NotFoundError({"claim_code": ["missing"]})
            with pytest.raises(NotFoundError):
                fulfill_order("code", "staff-1")
        assert domain.process.call_count == 1


class TestConcurrentFulfillment:
    def test_stale_stock_read_is_retried_and_never_oversells(self, add_book, member_id):
        book_id = add_book(title="Last Copy", stock_quantity=1)
        order_a = place_order(member_id, [{"book_id": book_id, "quantity": 1}])
        order_b = place_order(member_id, [{"book_id": book_id, "quantity": 1}])

        # Loaded before order A commits, so its version is out of date afterwards
        stale = current_domain.repository_for(Book).find_many([book_id])
        fulfill_order(order_a.claim_code, "staff-1")

        real_find_many = BookRepository.find_many
        calls = {"n": 0}

        def stale_on_first_call(self, book_ids):
            calls["n"] += 1
            if calls["n"] == 1:
                return stale
            return real_find_many(self, book_ids)

        with mock.patch.object(BookRepository, "find_many", stale_on_first_call):
            with pytest.raises(InsufficientStockError):
                fulfill_order(order_b.claim_code, "staff-2")

        assert calls["n"] == 2
        book = current_domain.repository_for(Book).get(book_id)
        assert book.stock_quantity == 0
        assert book.units_sold == 1
        assert current_domain.repository_for(Order).get(order_b.id).status == OrderStatus.PENDING.value
        assert current_domain.repository_for(ProcessedOrder).find_by_order_id(order_b.id) is None
