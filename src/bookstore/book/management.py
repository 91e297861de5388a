"""Catalogue management: add books, change pricing, adjust stock."""

from protean import handle
from protean.fields import Boolean, Date, DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from bookstore.book.book import Book
from bookstore.domain import bookstore


@bookstore.command(part_of="Book")
class AddBook:
    title: String(required=True, max_length=255)
    author: String(max_length=255)
    isbn: String(max_length=20)
    description: Text()
    genre: String(max_length=100)
    language: String(max_length=50)
    format: String(max_length=50)
    publisher: String(max_length=255)
    publication_date: Date(required=True)
    price: Float(required=True, min_value=0.0)
    stock_quantity: Integer(min_value=0, default=0)
    is_on_sale: Boolean(default=False)
    discount_percent: Float(min_value=0.0, max_value=100.0, default=0.0)
    is_available_in_library: Boolean(default=True)
    is_award_winner: Boolean(default=False)
    is_bestseller: Boolean(default=False)


@bookstore.command(part_of="Book")
class UpdateBookPricing:
    book_id: Identifier(required=True)
    price: Float(min_value=0.0)
    is_on_sale: Boolean()
    discount_percent: Float(min_value=0.0, max_value=100.0)
    discount_start: DateTime()
    discount_end: DateTime()


@bookstore.command(part_of="Book")
class AdjustStock:
    book_id: Identifier(required=True)
    quantity_change: Integer(required=True)
    reason: String(max_length=255)


_OPTIONAL_DETAILS = ("author", "isbn", "description", "genre", "language", "format", "publisher")


@bookstore.command_handler(part_of=Book)
class BookManagementHandler:
    @handle(AddBook)
    def add_book(self, command):
        details = {name: getattr(command, name) for name in _OPTIONAL_DETAILS if getattr(command, name) is not None}
        book = Book.add(
            title=command.title,
            publication_date=command.publication_date,
            price=command.price,
            stock_quantity=command.stock_quantity,
            is_on_sale=command.is_on_sale,
            discount_percent=command.discount_percent,
            is_available_in_library=command.is_available_in_library,
            is_award_winner=command.is_award_winner,
            is_bestseller=command.is_bestseller,
            **details,
        )
        current_domain.repository_for(Book).add(book)
        return str(book.id)

    @handle(UpdateBookPricing)
    def update_pricing(self, command):
        repo = current_domain.repository_for(Book)
        book = repo.get(command.book_id)
        book.update_pricing(
            price=command.price,
            is_on_sale=command.is_on_sale,
            discount_percent=command.discount_percent,
            discount_start=command.discount_start,
            discount_end=command.discount_end,
        )
        repo.add(book)

    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Book)
        book = repo.get(command.book_id)
        book.adjust_stock(command.quantity_change, reason=command.reason)
        repo.add(book)
