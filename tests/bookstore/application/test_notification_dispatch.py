"""Application tests for order notifications, sent after the order commits."""

from unittest import mock

import pytest
from bookstore.exceptions import InvalidStateError, NotFoundError
from bookstore.notifications.broadcast import recent_messages
from bookstore.notifications.channel import get_channel
from bookstore.notifications.notification import (
    Notification,
    NotificationChannel,
    NotificationRepository,
    NotificationStatus,
)
from bookstore.notifications.retry import retry_notification
from bookstore.ordering.order import Order, OrderStatus
from bookstore.ordering.placement import place_order
from protean.utils.globals import current_domain


def _notifications(order_id):
    return {n.channel: n for n in current_domain.repository_for(Notification).for_order(order_id)}


@pytest.fixture()
def order_factory(add_book, register_member):
    def _place(email="ada@example.com"):
        member = register_member(email=email, full_name="Ada Lovelace")
        dune = add_book(title="Dune")
        emma = add_book(title="Emma")
        return place_order(member, [{"book_id": dune, "quantity": 1}, {"book_id": emma, "quantity": 1}])

    return _place


class TestNotificationsOnPlacement:
    def test_one_notification_per_channel_sent(self, order_factory):
        order = order_factory()
        notifications = _notifications(order.id)

        assert set(notifications) == {channel.value for channel in NotificationChannel}
        assert all(n.status == NotificationStatus.SENT.value for n in notifications.values())
        assert all(n.attempts == 1 for n in notifications.values())

    def test_confirmation_email_has_claim_code_and_total(self, order_factory):
        order = order_factory()
        emails = get_channel(NotificationChannel.EMAIL.value).sent_emails

        assert len(emails) == 1
        assert emails[0]["to"] == "ada@example.com"
        assert order.claim_code in emails[0]["body"]
        assert f"{order.total_price:.2f}" in emails[0]["body"]

    def test_broadcast_log_entry(self, order_factory):
        order_factory()
        messages = recent_messages()
        assert [m.message for m in messages] == ["New Order Placed! 2 books ordered: Dune, Emma"]

    def test_push_published(self, order_factory):
        order = order_factory()
        published = get_channel(NotificationChannel.PUSH.value).published

        assert len(published) == 1
        assert published[0]["event_name"] == "OrderPlaced"
        assert published[0]["payload"]["order_id"] == str(order.id)
        assert published[0]["payload"]["message"] == "Someone just ordered: Dune, Emma"


class TestDeliveryFailures:
    def test_failing_email_does_not_affect_order(self, order_factory):
        email = get_channel(NotificationChannel.EMAIL.value)
        email.configure(should_succeed=False, failure_reason="SMTP unavailable")

        order = order_factory()

        assert current_domain.repository_for(Order).get(order.id).claim_code == order.claim_code
        failed = _notifications(order.id)[NotificationChannel.EMAIL.value]
        assert failed.status == NotificationStatus.FAILED.value
        assert failed.failure_reason == "SMTP unavailable"

    def test_failing_channel_is_retried_up_to_the_limit(self, order_factory):
        email = get_channel(NotificationChannel.EMAIL.value)
        email.configure(should_succeed=False)

        order = order_factory()

        assert email.calls == 3
        assert _notifications(order.id)[NotificationChannel.EMAIL.value].attempts == 3

    def test_other_channels_unaffected_by_email_failure(self, order_factory):
        get_channel(NotificationChannel.EMAIL.value).configure(should_succeed=False)
        order = order_factory()
        notifications = _notifications(order.id)
        assert notifications[NotificationChannel.PUSH.value].status == NotificationStatus.SENT.value
        assert notifications[NotificationChannel.BROADCAST.value].status == NotificationStatus.SENT.value

    def test_failing_push_does_not_affect_order(self, order_factory):
        get_channel(NotificationChannel.PUSH.value).configure(should_succeed=False)
        order = order_factory()
        assert _notifications(order.id)[NotificationChannel.PUSH.value].status == NotificationStatus.FAILED.value
        assert current_domain.repository_for(Order).get(order.id) is not None


class TestRetryNotification:
    def test_retry_failed_notification(self, order_factory):
        email = get_channel(NotificationChannel.EMAIL.value)
        email.configure(should_succeed=False)
        order = order_factory()
        failed = _notifications(order.id)[NotificationChannel.EMAIL.value]

        email.configure(should_succeed=True)
        retried = retry_notification(failed.id)

        assert retried.status == NotificationStatus.SENT.value
        assert retried.attempts == 4
        assert len(email.sent_emails) == 1

    def test_retry_still_failing(self, order_factory):
        email = get_channel(NotificationChannel.EMAIL.value)
        email.configure(should_succeed=False)
        order = order_factory()
        failed = _notifications(order.id)[NotificationChannel.EMAIL.value]

        retried = retry_notification(failed.id)
        assert retried.status == NotificationStatus.FAILED.value
        assert retried.attempts == 6

    def test_retry_sent_notification_rejected(self, order_factory):
        order = order_factory()
        sent = _notifications(order.id)[NotificationChannel.EMAIL.value]
        with pytest.raises(InvalidStateError):
            retry_notification(sent.id)

    def test_retry_unknown_notification(self):
        with pytest.raises(NotFoundError):
            retry_notification("no-such-notification")


class TestNotificationStoreFailures:
    def test_store_failure_does_not_fail_placement(self, order_factory):
        with mock.patch.object(NotificationRepository, "add", side_effect=RuntimeError("notification store down")):
            order = order_factory()

        assert order.claim_code
        assert current_domain.repository_for(Order).get(order.id).status == OrderStatus.PENDING.value
        assert _notifications(order.id) == {}

    def test_store_failure_still_attempts_every_channel(self, order_factory):
        with mock.patch.object(NotificationRepository, "add", side_effect=RuntimeError("notification store down")):
            order_factory()

        assert len(get_channel(NotificationChannel.EMAIL.value).sent_emails) == 1
        assert len(get_channel(NotificationChannel.PUSH.value).published) == 1

    def test_template_failure_skips_only_that_channel(self, order_factory):
        with mock.patch(
            "bookstore.notifications.templates.OrderConfirmationEmail.render",
            side_effect=KeyError("member_name"),
        ):
            order = order_factory()

        notifications = _notifications(order.id)
        assert NotificationChannel.EMAIL.value not in notifications
        assert notifications[NotificationChannel.PUSH.value].status == NotificationStatus.SENT.value
