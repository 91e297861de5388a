"""Order aggregate with its OrderItem lines.

Lifecycle:
    Pending → Fulfilled  (staff redeems the claim code)
    Pending → Cancelled  (owning member cancels)

Both end states are terminal. Items are snapshots taken at placement and never
change afterwards, whatever happens to the book later.
"""

import json
from datetime import datetime
from enum import Enum
from uuid import uuid4

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from bookstore.domain import bookstore
from bookstore.exceptions import InvalidStateError


class OrderStatus(Enum):
    PENDING = "Pending"
    FULFILLED = "Fulfilled"
    CANCELLED = "Cancelled"


def new_claim_code() -> str:
    return str(uuid4())


@bookstore.entity(part_of="Order")
class OrderItem:
    """One distinct book on an order, priced at placement time."""

    book_id: Identifier(required=True)
    title: String(required=True, max_length=255)
    quantity: Integer(required=True, min_value=1)
    unit_price: Float(required=True, min_value=0.0)

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@bookstore.aggregate
class Order:
    member_id: Identifier(required=True)
    placed_at: DateTime(default=datetime.now)
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    is_cancelled: Boolean(default=False)
    claim_code: String(required=True, max_length=36, unique=True)
    original_total: Float(default=0.0, min_value=0.0)
    total_price: Float(default=0.0, min_value=0.0)
    applied_five_percent_discount: Boolean(default=False)
    applied_ten_percent_discount: Boolean(default=False)
    items: HasMany(OrderItem)
    fulfilled_by: Identifier()
    fulfilled_at: DateTime()
    cancelled_at: DateTime()

    @invariant.post
    def discount_tiers_are_exclusive(self):
        if self.applied_five_percent_discount and self.applied_ten_percent_discount:
            raise ValidationError({"discount": ["Five and ten percent discounts cannot both apply"]})

    @invariant.post
    def cancelled_flag_matches_status(self):
        if self.is_cancelled != (self.status == OrderStatus.CANCELLED.value):
            raise ValidationError({"is_cancelled": ["Cancellation flag must agree with order status"]})

    @property
    def book_titles(self) -> list[str]:
        return [item.title for item in self.items]

    @classmethod
    def place(cls, member_id, lines, discount, member_email=None, member_name=None):
        """Create a Pending order from priced ``lines``.

        ``lines`` are ``(book_id, title, quantity, unit_price)`` tuples, one per
        distinct book. ``discount`` is the ``DiscountResult`` for the order.
        """
        from bookstore.ordering.events import OrderPlaced

        now = datetime.now()
        order = cls(
            member_id=member_id,
            placed_at=now,
            claim_code=new_claim_code(),
            original_total=discount.original_total,
            total_price=discount.discounted_total,
            applied_five_percent_discount=discount.applied_five_percent,
            applied_ten_percent_discount=discount.applied_ten_percent,
        )
        for book_id, title, quantity, unit_price in lines:
            order.add_items(OrderItem(book_id=book_id, title=title, quantity=quantity, unit_price=unit_price))

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                member_id=member_id,
                member_email=member_email,
                member_name=member_name,
                claim_code=order.claim_code,
                original_total=order.original_total,
                total_price=order.total_price,
                item_count=len(order.items),
                items=json.dumps(order.items_payload()),
                placed_at=now,
            )
        )
        return order

    def items_payload(self) -> list[dict]:
        return [
            {
                "book_id": str(item.book_id),
                "title": item.title,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
            }
            for item in self.items
        ]

    def cancel(self):
        from bookstore.ordering.events import OrderCancelled

        if self.status != OrderStatus.PENDING.value:
            raise InvalidStateError({"status": [f"Only pending orders can be cancelled, order is {self.status}"]})

        now = datetime.now()
        with atomic_change(self):
            self.status = OrderStatus.CANCELLED.value
            self.is_cancelled = True
            self.cancelled_at = now
        self.raise_(
            OrderCancelled(
                order_id=self.id,
                member_id=self.member_id,
                total_price=self.total_price,
                cancelled_at=now,
            )
        )

    def mark_fulfilled(self, staff_id):
        from bookstore.ordering.events import OrderFulfilled

        if self.status != OrderStatus.PENDING.value:
            raise InvalidStateError({"status": [f"Only pending orders can be fulfilled, order is {self.status}"]})

        now = datetime.now()
        self.status = OrderStatus.FULFILLED.value
        self.fulfilled_by = staff_id
        self.fulfilled_at = now
        self.raise_(
            OrderFulfilled(
                order_id=self.id,
                member_id=self.member_id,
                staff_id=staff_id,
                claim_code=self.claim_code,
                total_price=self.total_price,
                items=json.dumps(self.items_payload()),
                fulfilled_at=now,
            )
        )
