"""Notification aggregate: one delivery record per order and channel.

State machine:
    PENDING → SENT
    PENDING → FAILED → (retry) → PENDING
"""

from datetime import datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer, String, Text

from bookstore.domain import bookstore
from bookstore.exceptions import InvalidStateError


class NotificationChannel(Enum):
    EMAIL = "Email"
    BROADCAST = "Broadcast"
    PUSH = "Push"


class NotificationStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"


_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {NotificationStatus.SENT, NotificationStatus.FAILED},
    NotificationStatus.FAILED: {NotificationStatus.PENDING},
    NotificationStatus.SENT: set(),
}


@bookstore.aggregate
class Notification:
    """A message about an order sent through one channel.

    Delivery failures are recorded here and never reach whoever placed the
    order. ``attempts`` counts every send attempt, across retries.
    """

    order_id: Identifier(required=True)
    recipient: String(required=True, max_length=254)
    channel: String(choices=NotificationChannel, required=True)
    subject: String(max_length=500)
    body: Text(required=True)
    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    attempts: Integer(default=0, min_value=0)
    failure_reason: String(max_length=500)
    sent_at: DateTime()
    created_at: DateTime(default=datetime.now)

    @classmethod
    def create(cls, order_id, recipient, channel, body, subject=None):
        return cls(
            order_id=order_id,
            recipient=recipient,
            channel=channel,
            subject=subject,
            body=body,
            status=NotificationStatus.PENDING.value,
            created_at=datetime.now(),
        )

    def _assert_can_transition(self, target_status):
        current = NotificationStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidStateError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def mark_sent(self, attempts):
        self._assert_can_transition(NotificationStatus.SENT)
        self.status = NotificationStatus.SENT.value
        self.attempts = self.attempts + attempts
        self.failure_reason = None
        self.sent_at = datetime.now()

    def mark_failed(self, reason, attempts):
        self._assert_can_transition(NotificationStatus.FAILED)
        self.status = NotificationStatus.FAILED.value
        self.attempts = self.attempts + attempts
        self.failure_reason = (reason or "Unknown dispatch error")[:500]

    def reset_for_retry(self):
        """Move a failed notification back to PENDING so it can be sent again."""
        self._assert_can_transition(NotificationStatus.PENDING)
        self.status = NotificationStatus.PENDING.value


@bookstore.repository(part_of=Notification)
class NotificationRepository:
    def for_order(self, order_id) -> list[Notification]:
        return self._dao.query.filter(order_id=str(order_id)).all().items
