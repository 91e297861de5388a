"""Broadcast log: short public messages about store activity, newest first."""

from datetime import datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, String
from protean.utils.globals import current_domain

from bookstore.domain import bookstore
from bookstore.utils.settings import setting


@bookstore.aggregate
class BroadcastMessage:
    message: String(required=True, max_length=1000)
    sent_at: DateTime(default=datetime.now)


def append_message(message: str) -> BroadcastMessage:
    if not message or not message.strip():
        raise ValidationError({"message": ["Broadcast message cannot be empty"]})

    entry = BroadcastMessage(message=message.strip()[:1000], sent_at=datetime.now())
    current_domain.repository_for(BroadcastMessage).add(entry)
    return entry


def recent_messages(limit: int | None = None) -> list[BroadcastMessage]:
    limit = int(limit if limit is not None else setting("BROADCAST_RECENT_LIMIT"))
    if limit <= 0:
        return []
    return list(
        current_domain.repository_for(BroadcastMessage)
        ._dao.query.order_by("-sent_at")
        .limit(limit)
        .all()
        .items
    )
