"""Domain events for the Book aggregate."""

from protean.fields import Boolean, Float, Identifier, Integer, String

from bookstore.domain import bookstore


@bookstore.event(part_of="Book")
class BookAdded:
    """A new title was added to the catalogue."""

    __version__ = 1

    book_id: Identifier(required=True)
    title: String(required=True)
    author: String()
    isbn: String()
    price: Float(required=True)
    stock_quantity: Integer(required=True)


@bookstore.event(part_of="Book")
class BookPricingUpdated:
    """Base price, sale flag or discount of a book changed."""

    __version__ = 1

    book_id: Identifier(required=True)
    price: Float(required=True)
    is_on_sale: Boolean(required=True)
    discount_percent: Float(required=True)
    effective_price: Float(required=True)


@bookstore.event(part_of="Book")
class StockAdjusted:
    __version__ = 1

    book_id: Identifier(required=True)
    quantity_change: Integer(required=True)
    stock_quantity: Integer(required=True)
    reason: String()
