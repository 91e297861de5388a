"""Read side of the cart: lines priced at the books' current effective price."""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from bookstore.book.book import Book
from bookstore.cart.cart import Cart


@dataclass
class CartLine:
    book_id: str
    title: str
    author: str
    quantity: int
    price: float
    is_on_sale: bool
    discount_percent: float
    effective_price: float

    @property
    def line_total(self) -> float:
        return round(self.effective_price * self.quantity, 2)


@dataclass
class CartView:
    member_id: str
    lines: list = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.lines)

    @property
    def subtotal(self) -> float:
        return round(sum(line.line_total for line in self.lines), 2)


def get_cart(member_id) -> CartView:
    """The member's cart; an empty view when nothing has been added yet.

    Lines whose book no longer resolves are left out.
    """
    cart = current_domain.repository_for(Cart).for_member(member_id)
    view = CartView(member_id=str(member_id))
    if cart is None or not cart.items:
        return view

    books = current_domain.repository_for(Book).find_many(item.book_id for item in cart.items)
    for item in cart.items:
        book = books.get(str(item.book_id))
        if book is None:
            continue
        view.lines.append(
            CartLine(
                book_id=str(book.id),
                title=book.title,
                author=book.author,
                quantity=item.quantity,
                price=book.price,
                is_on_sale=book.is_on_sale,
                discount_percent=book.discount_percent or 0.0,
                effective_price=book.effective_price,
            )
        )
    return view
