"""Checkout: turn the member's cart into an Order and empty the cart."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from bookstore.cart.cart import Cart
from bookstore.cart.management import cart_for
from bookstore.domain import bookstore
from bookstore.exceptions import InvalidItemError
from bookstore.ordering.order import Order
from bookstore.ordering.placement import build_order


@bookstore.command(part_of="Cart")
class CheckoutCart:
    member_id: Identifier(required=True)


@bookstore.command_handler(part_of=Cart)
class CheckoutCartHandler:
    @handle(CheckoutCart)
    def checkout(self, command):
        cart = cart_for(command.member_id)
        if not cart.items:
            raise InvalidItemError({"cart": ["The cart is empty"]})

        order = build_order(command.member_id, cart.lines())
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        return str(order.id)


def checkout_cart(member_id) -> Order:
    """Place an order from the member's cart and return it as persisted."""
    order_id = current_domain.process(CheckoutCart(member_id=str(member_id)), asynchronous=False)
    return current_domain.repository_for(Order).get(order_id)
