"""Member shopping cart: the books a member intends to order.

One cart per member. Lines are keyed by book; setting a quantity of zero or
less removes the line. Checking out turns the lines into an Order and empties
the cart in the same unit of work.
"""

from datetime import datetime

from protean.fields import DateTime, HasMany, Identifier, Integer

from bookstore.domain import bookstore


@bookstore.entity(part_of="Cart")
class CartItem:
    book_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)
    added_at: DateTime(default=datetime.now)


@bookstore.aggregate
class Cart:
    member_id: Identifier(required=True, unique=True)
    items: HasMany(CartItem)
    updated_at: DateTime(default=datetime.now)

    @classmethod
    def create(cls, member_id):
        return cls(member_id=member_id, updated_at=datetime.now())

    def _line_for(self, book_id):
        return next((item for item in self.items if str(item.book_id) == str(book_id)), None)

    def set_quantity(self, book_id, quantity: int) -> None:
        """Add the book or replace its quantity; ``quantity <= 0`` removes it."""
        from bookstore.cart.events import CartItemUpdated

        if quantity <= 0:
            self.remove_book(book_id)
            return

        existing = self._line_for(book_id)
        if existing:
            existing.quantity = quantity
        else:
            self.add_items(CartItem(book_id=book_id, quantity=quantity, added_at=datetime.now()))
        self.updated_at = datetime.now()

        self.raise_(CartItemUpdated(cart_id=self.id, member_id=self.member_id, book_id=book_id, quantity=quantity))

    def remove_book(self, book_id) -> None:
        """Drop the book's line; a book that is not in the cart is ignored."""
        from bookstore.cart.events import CartItemRemoved

        existing = self._line_for(book_id)
        if existing is None:
            return
        self.remove_items(existing)
        self.updated_at = datetime.now()
        self.raise_(CartItemRemoved(cart_id=self.id, member_id=self.member_id, book_id=book_id))

    def clear(self) -> None:
        from bookstore.cart.events import CartCleared

        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now()
        self.raise_(CartCleared(cart_id=self.id, member_id=self.member_id))

    def lines(self) -> list[dict]:
        """Cart contents in the shape ``PlaceOrder`` accepts."""
        return [{"book_id": str(item.book_id), "quantity": item.quantity} for item in self.items]


@bookstore.repository(part_of=Cart)
class CartRepository:
    def for_member(self, member_id) -> Cart | None:
        return self._dao.query.filter(member_id=str(member_id)).all().first
