"""Email channel port."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> dict:
        """Send one email.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
