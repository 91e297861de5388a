"""Book aggregate: catalogue entry, pricing and on-hand stock."""

from datetime import datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, DateTime, Float, Integer, String, Text

from bookstore.domain import bookstore
from bookstore.exceptions import InsufficientStockError


@bookstore.aggregate
class Book:
    """A title on sale in the store.

    ``stock_quantity`` is the on-hand count. It is only decremented when staff
    fulfil an order, never at placement.
    """

    title: String(required=True, max_length=255)
    author: String(max_length=255, default="")
    isbn: String(max_length=20, default="")
    description: Text(default="")
    genre: String(max_length=100, default="")
    language: String(max_length=50, default="")
    format: String(max_length=50, default="")
    publisher: String(max_length=255, default="")
    publication_date: Date(required=True)
    price: Float(required=True, min_value=0.0)
    stock_quantity: Integer(min_value=0, default=0)
    is_on_sale: Boolean(default=False)
    discount_percent: Float(min_value=0.0, max_value=100.0, default=0.0)
    discount_start: DateTime()
    discount_end: DateTime()
    is_available_in_library: Boolean(default=True)
    is_award_winner: Boolean(default=False)
    is_bestseller: Boolean(default=False)
    units_sold: Integer(min_value=0, default=0)
    created_at: DateTime(default=datetime.now)

    @invariant.post
    def discount_window_must_be_ordered(self):
        if self.discount_start and self.discount_end and self.discount_end < self.discount_start:
            raise ValidationError({"discount_end": ["Discount end must not precede its start"]})

    @property
    def effective_price(self) -> float:
        """Price a buyer pays per unit right now."""
        if self.is_on_sale and self.discount_percent and self.discount_percent > 0:
            return round(self.price * (1 - self.discount_percent / 100), 2)
        return round(self.price, 2)

    @classmethod
    def add(cls, title, publication_date, price, stock_quantity=0, **details):
        from bookstore.book.events import BookAdded

        book = cls(
            title=title,
            publication_date=publication_date,
            price=price,
            stock_quantity=stock_quantity,
            **details,
        )
        book.raise_(
            BookAdded(
                book_id=book.id,
                title=book.title,
                author=book.author,
                isbn=book.isbn,
                price=book.price,
                stock_quantity=book.stock_quantity,
            )
        )
        return book

    def update_pricing(
        self,
        price=None,
        is_on_sale=None,
        discount_percent=None,
        discount_start=None,
        discount_end=None,
    ):
        from bookstore.book.events import BookPricingUpdated

        if price is not None:
            self.price = price
        if is_on_sale is not None:
            self.is_on_sale = is_on_sale
        if discount_percent is not None:
            self.discount_percent = discount_percent
        if discount_start is not None:
            self.discount_start = discount_start
        if discount_end is not None:
            self.discount_end = discount_end

        self.raise_(
            BookPricingUpdated(
                book_id=self.id,
                price=self.price,
                is_on_sale=self.is_on_sale,
                discount_percent=self.discount_percent,
                effective_price=self.effective_price,
            )
        )

    def adjust_stock(self, quantity_change, reason=None):
        from bookstore.book.events import StockAdjusted

        new_quantity = self.stock_quantity + quantity_change
        if new_quantity < 0:
            raise ValidationError(
                {"stock_quantity": [f"Cannot reduce stock below zero (on hand {self.stock_quantity})"]}
            )
        self.stock_quantity = new_quantity
        self.raise_(
            StockAdjusted(
                book_id=self.id,
                quantity_change=quantity_change,
                stock_quantity=new_quantity,
                reason=reason,
            )
        )

    def ensure_stock_for(self, quantity):
        if self.stock_quantity < quantity:
            raise InsufficientStockError(self.id, self.title, quantity, self.stock_quantity)

    def deduct_stock(self, quantity):
        """Hand ``quantity`` copies over; raises when on-hand stock is short."""
        self.ensure_stock_for(quantity)
        self.stock_quantity -= quantity
        self.units_sold += quantity
