"""Order notifications: created on OrderPlaced, sent through channel adapters.

The handler runs after the placing unit of work has committed, so nothing
here can undo an order. Each channel gets its own ``Notification`` record;
sends are retried a configured number of times and the outcome (Sent or
Failed) is persisted.
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from tenacity import Retrying, stop_after_attempt, wait_fixed

from bookstore.domain import bookstore
from bookstore.notifications.channel import get_channel
from bookstore.notifications.notification import Notification, NotificationChannel
from bookstore.notifications.templates import ORDER_PLACED_TEMPLATES, OrderPlacedPush
from bookstore.ordering.events import OrderPlaced
from bookstore.utils.settings import setting

logger = structlog.get_logger(__name__)

BROADCAST_RECIPIENT = "broadcast-log"
PUSH_RECIPIENT = "all-clients"


class ChannelDeliveryError(Exception):
    """A channel adapter reported that it could not deliver."""


def _dispatch_via_channel(adapter, notification: Notification) -> dict:
    channel = notification.channel
    if channel == NotificationChannel.EMAIL.value:
        return adapter.send(to=notification.recipient, subject=notification.subject, body=notification.body)
    if channel == NotificationChannel.BROADCAST.value:
        return adapter.send(notification.body)
    if channel == NotificationChannel.PUSH.value:
        return adapter.publish(
            OrderPlacedPush.event_name,
            {"order_id": str(notification.order_id), "message": notification.body},
        )
    raise ValueError(f"Unknown channel: {channel}")


def deliver(notification: Notification) -> Notification:
    """Send a pending notification, retrying, and record the outcome on it.

    Never raises for delivery problems; the caller persists the notification.
    """
    attempts = 0

    def attempt():
        nonlocal attempts
        attempts += 1
        result = _dispatch_via_channel(get_channel(notification.channel), notification)
        if result.get("status") != "sent":
            raise ChannelDeliveryError(result.get("error") or "Unknown dispatch error")
        return result

    retryer = Retrying(
        stop=stop_after_attempt(int(setting("NOTIFICATION_MAX_ATTEMPTS"))),
        wait=wait_fixed(float(setting("NOTIFICATION_RETRY_WAIT_SECONDS"))),
        reraise=True,
    )
    try:
        retryer(attempt)
    except Exception as exc:
        notification.mark_failed(str(exc), attempts)
        logger.error(
            "Notification dispatch failed",
            notification_id=str(notification.id),
            order_id=str(notification.order_id),
            channel=notification.channel,
            attempts=attempts,
            error=str(exc),
        )
    else:
        notification.mark_sent(attempts)
        logger.info(
            "Notification sent",
            notification_id=str(notification.id),
            order_id=str(notification.order_id),
            channel=notification.channel,
        )
    return notification


def _recipient_for(channel: str, event: OrderPlaced) -> str | None:
    if channel == NotificationChannel.EMAIL.value:
        return event.member_email
    if channel == NotificationChannel.BROADCAST.value:
        return BROADCAST_RECIPIENT
    return PUSH_RECIPIENT


def _order_context(event: OrderPlaced) -> dict:
    items = json.loads(event.items) if isinstance(event.items, str) else (event.items or [])
    return {
        "order_id": str(event.order_id),
        "member_name": event.member_name,
        "claim_code": event.claim_code,
        "total_price": event.total_price,
        "titles": [item["title"] for item in items],
    }


@bookstore.event_handler(part_of=Notification, stream_category="bookstore::order")
class OrderPlacedNotifier:
    """Sends the confirmation email, broadcast entry and push for a new order.

    The order is already committed when this runs, so every failure here is
    logged and swallowed per channel.
    """

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        try:
            context = _order_context(event)
        except Exception:
            logger.exception("Could not read order for notifications", order_id=str(event.order_id))
            return

        for template in ORDER_PLACED_TEMPLATES:
            recipient = _recipient_for(template.channel, event)
            if not recipient:
                logger.warning(
                    "No recipient for order notification, skipping",
                    order_id=str(event.order_id),
                    channel=template.channel,
                )
                continue

            try:
                self._notify(event, template, recipient, context)
            except Exception:
                logger.exception(
                    "Failed to record order notification",
                    order_id=str(event.order_id),
                    channel=template.channel,
                )

    def _notify(self, event, template, recipient, context) -> None:
        content = template.render(context)
        notification = Notification.create(
            order_id=event.order_id,
            recipient=recipient,
            channel=template.channel,
            subject=content["subject"],
            body=content["body"],
        )
        current_domain.repository_for(Notification).add(deliver(notification))
