"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer

from bookstore.domain import bookstore


@bookstore.event(part_of="Cart")
class CartItemUpdated:
    __version__ = 1

    cart_id: Identifier(required=True)
    member_id: Identifier(required=True)
    book_id: Identifier(required=True)
    quantity: Integer(required=True)


@bookstore.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id: Identifier(required=True)
    member_id: Identifier(required=True)
    book_id: Identifier(required=True)


@bookstore.event(part_of="Cart")
class CartCleared:
    __version__ = 1

    cart_id: Identifier(required=True)
    member_id: Identifier(required=True)
