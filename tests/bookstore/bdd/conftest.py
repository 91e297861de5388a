"""Shared BDD fixtures and step definitions for ordering scenarios."""

from datetime import date

import pytest
from bookstore.book.book import Book
from bookstore.book.management import AdjustStock, UpdateBookPricing
from bookstore.cart.management import UpdateCartItem
from bookstore.ordering.cancellation import cancel_order
from bookstore.ordering.fulfillment import fulfill_order
from bookstore.ordering.placement import place_order
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def books():
    """Book ids keyed by title, in catalogue order."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered member", target_fixture="member")
def a_registered_member(register_member):
    return register_member(email="bdd.reader@example.com", full_name="Bdd Reader")


@given(parsers.cfparse('the catalogue has "{title}" priced at {price:f} with {stock:d} in stock'))
def catalogue_has_book(add_book, books, title, price, stock):
    books[title] = add_book(title=title, price=price, stock_quantity=stock)


@given(parsers.cfparse("the catalogue has {count:d} more books priced at {price:f}"))
def catalogue_has_more_books(add_book, books, count, price):
    for n in range(count):
        title = f"Extra {n + 1}"
        books[title] = add_book(title=title, price=price, publication_date=date(2019, 6, 1))


@given(parsers.cfparse('"{title}" is on sale at {percent:d} percent off'))
def book_on_sale(books, title, percent):
    current_domain.process(
        UpdateBookPricing(book_id=books[title], is_on_sale=True, discount_percent=float(percent)),
        asynchronous=False,
    )


@given(parsers.cfparse('the stock of "{title}" drops to {stock:d}'))
def stock_drops(books, title, stock):
    book = current_domain.repository_for(Book).get(books[title])
    current_domain.process(
        AdjustStock(book_id=books[title], quantity_change=stock - book.stock_quantity, reason="Sold elsewhere"),
        asynchronous=False,
    )


@given(parsers.cfparse('the member has ordered {quantity:d} of "{title}"'), target_fixture="order")
def member_has_ordered(member, books, quantity, title):
    return place_order(member, [{"book_id": books[title], "quantity": quantity}])


@given("staff have fulfilled the order")
def staff_have_fulfilled(order):
    fulfill_order(order.claim_code, "staff-1")


@given("the member has cancelled the order")
def member_has_cancelled(member, order):
    cancel_order(order.id, member)


@given(parsers.cfparse('the member has put {quantity:d} of "{title}" in the cart'))
def member_fills_cart(member, books, quantity, title):
    current_domain.process(
        UpdateCartItem(member_id=member, book_id=books[title], quantity=quantity),
        asynchronous=False,
    )
