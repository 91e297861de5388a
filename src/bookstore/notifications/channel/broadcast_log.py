"""Broadcast channel adapter writing to the persisted broadcast log."""

from bookstore.notifications.broadcast import append_message


class BroadcastLogAdapter:
    def send(self, message: str) -> dict:
        entry = append_message(message)
        return {"message_id": str(entry.id), "status": "sent"}
