"""Bookstore API package."""

from bookstore.api.errors import register_error_handlers
from bookstore.api.routes import (
    book_router,
    broadcast_router,
    cart_router,
    dashboard_router,
    discount_router,
    member_router,
    notification_router,
    order_router,
    staff_router,
)

ROUTERS = [
    book_router,
    member_router,
    order_router,
    cart_router,
    staff_router,
    discount_router,
    broadcast_router,
    notification_router,
    dashboard_router,
]

__all__ = [
    "ROUTERS",
    "book_router",
    "broadcast_router",
    "cart_router",
    "dashboard_router",
    "discount_router",
    "member_router",
    "notification_router",
    "order_router",
    "register_error_handlers",
    "staff_router",
]
