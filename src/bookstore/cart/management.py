"""Cart item management: set a quantity, remove a book, clear the cart."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from bookstore.book.book import Book
from bookstore.cart.cart import Cart
from bookstore.domain import bookstore
from bookstore.exceptions import InvalidItemError, NotFoundError
from bookstore.member.member import Member

logger = structlog.get_logger(__name__)


@bookstore.command(part_of="Cart")
class UpdateCartItem:
    member_id: Identifier(required=True)
    book_id: Identifier(required=True)
    quantity: Integer(required=True)


@bookstore.command(part_of="Cart")
class RemoveCartItem:
    member_id: Identifier(required=True)
    book_id: Identifier(required=True)


@bookstore.command(part_of="Cart")
class ClearCart:
    member_id: Identifier(required=True)


def cart_for(member_id) -> Cart:
    """The member's cart, created empty on first use."""
    try:
        current_domain.repository_for(Member).get(member_id)
    except ObjectNotFoundError:
        raise NotFoundError({"member": [f"Member {member_id} does not exist"]}) from None

    cart = current_domain.repository_for(Cart).for_member(member_id)
    return cart if cart is not None else Cart.create(member_id)


@bookstore.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = cart_for(command.member_id)

        if command.quantity > 0:
            try:
                book = current_domain.repository_for(Book).get(command.book_id)
            except ObjectNotFoundError:
                raise InvalidItemError({"book_id": [f"Book {command.book_id} does not exist"]}) from None
            if not book.is_available_in_library or book.stock_quantity <= 0:
                raise InvalidItemError({"book_id": [f"{book.title} is not available in the library"]})
            book.ensure_stock_for(command.quantity)

        cart.set_quantity(command.book_id, command.quantity)
        current_domain.repository_for(Cart).add(cart)
        logger.info(
            "Cart updated",
            member_id=str(command.member_id),
            book_id=str(command.book_id),
            quantity=command.quantity,
        )

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        cart = cart_for(command.member_id)
        cart.remove_book(command.book_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = cart_for(command.member_id)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
