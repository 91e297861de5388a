"""Application tests for catalogue management commands."""

from datetime import date

import pytest
from bookstore.book.book import Book
from bookstore.book.management import AddBook, AdjustStock, UpdateBookPricing
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain


class TestAddBook:
    def test_add_book_with_defaults(self):
        book_id = current_domain.process(
            AddBook(title="Beloved", publication_date=date(1987, 9, 2), price=14.5),
            asynchronous=False,
        )
        book = current_domain.repository_for(Book).get(book_id)
        assert book.title == "Beloved"
        assert book.stock_quantity == 0
        assert book.is_on_sale is False
        assert book.discount_percent == 0.0
        assert book.is_available_in_library is True
        assert book.units_sold == 0

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            AddBook(title="Bad", publication_date=date(2000, 1, 1), price=-1.0)


class TestUpdatePricing:
    def test_put_book_on_sale(self, add_book):
        book_id = add_book(price=40.0)
        current_domain.process(
            UpdateBookPricing(book_id=book_id, is_on_sale=True, discount_percent=25.0),
            asynchronous=False,
        )
        book = current_domain.repository_for(Book).get(book_id)
        assert book.price == 40.0
        assert book.effective_price == 30.0


class TestAdjustStock:
    def test_restock(self, add_book):
        book_id = add_book(stock_quantity=2)
        current_domain.process(AdjustStock(book_id=book_id, quantity_change=5, reason="Delivery"), asynchronous=False)
        assert current_domain.repository_for(Book).get(book_id).stock_quantity == 7

    def test_cannot_go_negative(self, add_book):
        book_id = add_book(stock_quantity=2)
        with pytest.raises(ValidationError):
            current_domain.process(AdjustStock(book_id=book_id, quantity_change=-3), asynchronous=False)
        assert current_domain.repository_for(Book).get(book_id).stock_quantity == 2
