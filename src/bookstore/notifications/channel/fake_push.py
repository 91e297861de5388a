"""In-memory push adapter used by default and in tests."""

from uuid import uuid4

from bookstore.notifications.channel.push_port import PushPort


class FakePushAdapter(PushPort):
    def __init__(self):
        self.published: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"
        self.calls = 0

    def configure(self, should_succeed: bool = True, failure_reason: str = "Push delivery failed"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def publish(self, event_name: str, payload: dict) -> dict:
        self.calls += 1
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"push-{uuid4().hex[:12]}"
        self.published.append({"message_id": message_id, "event_name": event_name, "payload": payload})
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.published.clear()
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"
        self.calls = 0
