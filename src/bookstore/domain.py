"""Bookstore bounded context: catalogue, members, orders and fulfillment.

Handles book pricing and stock, order placement with tiered discounts,
claim-code fulfillment by staff, and the notifications that follow a
placed order. Configuration is read from ``domain.toml`` next to this file,
with overlays selected by ``PROTEAN_ENV``.
"""

from protean.domain import Domain

from bookstore.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

bookstore = Domain(name="bookstore")
