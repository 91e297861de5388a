"""Domain events for the Order aggregate.

``OrderPlaced`` drives notification dispatch; all three events feed the sales
projections.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from bookstore.domain import bookstore


@bookstore.event(part_of="Order")
class OrderPlaced:
    """A member placed an order and received a claim code."""

    __version__ = 1

    order_id: Identifier(required=True)
    member_id: Identifier(required=True)
    member_email: String()
    member_name: String()
    claim_code: String(required=True)
    original_total: Float(required=True)
    total_price: Float(required=True)
    item_count: Integer(required=True)
    items: Text(required=True)  # JSON: list of line dicts
    placed_at: DateTime(required=True)


@bookstore.event(part_of="Order")
class OrderCancelled:
    """The owning member cancelled a pending order."""

    __version__ = 1

    order_id: Identifier(required=True)
    member_id: Identifier(required=True)
    total_price: Float(required=True)
    cancelled_at: DateTime(required=True)


@bookstore.event(part_of="Order")
class OrderFulfilled:
    """Staff handed the books over and stock was deducted."""

    __version__ = 1

    order_id: Identifier(required=True)
    member_id: Identifier(required=True)
    staff_id: Identifier(required=True)
    claim_code: String(required=True)
    total_price: Float(required=True)
    items: Text(required=True)  # JSON: list of line dicts
    fulfilled_at: DateTime(required=True)
