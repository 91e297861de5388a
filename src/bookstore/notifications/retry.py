"""RetryNotification command and handler: re-send a failed notification."""

from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bookstore.domain import bookstore
from bookstore.exceptions import NotFoundError
from bookstore.notifications.dispatch import deliver
from bookstore.notifications.notification import Notification


@bookstore.command(part_of="Notification")
class RetryNotification:
    notification_id: Identifier(required=True)


@bookstore.command_handler(part_of=Notification)
class RetryNotificationHandler:
    @handle(RetryNotification)
    def retry_notification(self, command: RetryNotification):
        repo = current_domain.repository_for(Notification)
        try:
            notification = repo.get(command.notification_id)
        except ObjectNotFoundError:
            raise NotFoundError({"notification": [f"Notification {command.notification_id} not found"]}) from None

        notification.reset_for_retry()
        repo.add(deliver(notification))
        return notification.status


def retry_notification(notification_id) -> Notification:
    current_domain.process(RetryNotification(notification_id=str(notification_id)), asynchronous=False)
    return current_domain.repository_for(Notification).get(str(notification_id))
