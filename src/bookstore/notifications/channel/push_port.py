"""Real-time push channel port."""

from abc import ABC, abstractmethod


class PushPort(ABC):
    @abstractmethod
    def publish(self, event_name: str, payload: dict) -> dict:
        """Publish ``payload`` to every connected client under ``event_name``.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
