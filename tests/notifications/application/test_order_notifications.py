"""Application tests for order notifications: post-commit dispatch and the inbox."""

import pytest
from notifications.channel import DeliveryReceipt, PushChannel, get_channel, register_channel
from notifications.notification.helpers import notify_buyer
from notifications.notification.inbox import MarkNotificationRead, list_notifications
from notifications.notification.notification import DeliveryStatus, NotificationType, OrderNotification
from notifications.templates import get_template
from protean import UnitOfWork, current_domain
from protean.exceptions import ObjectNotFoundError
from shared.actor import Actor, Role


class _ExplodingChannel(PushChannel):
    def deliver(self, recipient, heading, text, payload=None) -> DeliveryReceipt:
        raise ConnectionError("push gateway unreachable")


def _notification(notification_id):
    return current_domain.repository_for(OrderNotification).get(notification_id)


def _mark_read(actor, notification_id):
    return current_domain.process(
        MarkNotificationRead(notification_id=str(notification_id), **actor.as_fields()), asynchronous=False
    )


class TestPostCommitDispatch:
    def test_pushed_after_commit(self, push):
        notification_id = notify_buyer("buyer-001", NotificationType.ORDER_ACCEPTED, {"estimated_delivery_days": 4})

        (sent,) = push.deliveries
        assert sent.recipient == "buyer-001"
        assert sent.heading == "Order Accepted"
        assert sent.text == "Your order has been accepted! Estimated delivery: 4 days"
        assert sent.payload["type"] == "order_accepted"
        assert sent.payload["notification_id"] == notification_id

        notification = _notification(notification_id)
        assert notification.delivery_status == DeliveryStatus.SENT.value
        assert notification.sent_at is not None

    def test_nothing_is_pushed_before_commit(self, push, count):
        with UnitOfWork():
            notify_buyer("buyer-001", NotificationType.ORDER_PREPARING)
            assert push.deliveries == []

        assert len(push.deliveries) == 1
        assert count(OrderNotification) == 1

    def test_rolled_back_notifications_are_dropped(self, push, count):
        with pytest.raises(RuntimeError):
            with UnitOfWork():
                notify_buyer("buyer-001", NotificationType.ORDER_SHIPPED, {"tracking_number": "EG1"})
                raise RuntimeError("transition failed")

        assert push.deliveries == []
        assert count(OrderNotification) == 0

    def test_refused_delivery_is_recorded(self, push):
        push.refuse("Device token expired")

        notification_id = notify_buyer("buyer-001", NotificationType.ORDER_DELIVERED)

        notification = _notification(notification_id)
        assert notification.delivery_status == DeliveryStatus.FAILED.value
        assert notification.failure_reason == "Device token expired"
        assert push.deliveries == []

    def test_channel_exception_is_recorded_not_raised(self):
        register_channel(_ExplodingChannel())

        notification_id = notify_buyer("buyer-001", NotificationType.ORDER_CANCELLED, {"reason": "Out of stock"})

        notification = _notification(notification_id)
        assert notification.delivery_status == DeliveryStatus.FAILED.value
        assert notification.failure_reason == "push gateway unreachable"

    def test_failed_push_keeps_the_inbox_entry(self, push, buyer):
        push.refuse()

        notify_buyer("buyer-001", NotificationType.PAYMENT_REJECTED)

        (listed,) = list_notifications(buyer)
        assert listed.title == "Payment Rejected"
        assert listed.failure_reason == "Device unreachable"

    def test_record_keeps_rendered_content(self):
        notification_id = notify_buyer(
            "buyer-001",
            NotificationType.ORDER_REJECTED,
            {"reason": "Out of materials"},
            order_id="order-1",
            order_line_id="line-1",
        )

        stored = _notification(notification_id)
        assert stored.title == "Order Rejected"
        assert stored.message == "Your order was rejected. Reason: Out of materials"
        assert (stored.order_id, stored.order_line_id) == ("order-1", "line-1")
        assert stored.is_read is False

    def test_registered_channel_is_used(self):
        class _Counting(PushChannel):
            recipients = []

            def deliver(self, recipient, heading, text, payload=None):
                self.recipients.append(recipient)
                return DeliveryReceipt(delivered=True, reference="ext-1")

        channel = _Counting()
        register_channel(channel)

        notify_buyer("buyer-009", NotificationType.ORDER_DELIVERED)

        assert get_channel() is channel
        assert channel.recipients == ["buyer-009"]


class TestTemplates:
    @pytest.mark.parametrize(
        "notification_type, context, title, message",
        [
            (
                NotificationType.ORDER_SHIPPED,
                {},
                "Order Shipped!",
                "Your order is on the way! Tracking number: N/A",
            ),
            (
                NotificationType.ORDER_CANCELLED,
                {"reason": "Out of stock"},
                "Order Cancelled",
                "Your order was cancelled. Reason: Out of stock",
            ),
            (
                NotificationType.PAYMENT_VERIFIED,
                {"amount": 230},
                "Payment Confirmed",
                "Your payment of 230 EGP has been verified.",
            ),
            (
                NotificationType.PAYMENT_REJECTED,
                {"note": "Blurry receipt"},
                "Payment Rejected",
                "We could not verify your payment. Blurry receipt",
            ),
        ],
    )
    def test_renders(self, notification_type, context, title, message):
        assert get_template(notification_type.value).render(context) == {"title": title, "message": message}

    def test_every_type_has_a_template(self):
        for notification_type in NotificationType:
            assert get_template(notification_type.value).notification_type == notification_type.value

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            get_template("order_teleported")


class TestInbox:
    @pytest.fixture
    def inbox(self):
        first = notify_buyer("buyer-001", NotificationType.PAYMENT_VERIFIED, {"amount": 230})
        second = notify_buyer("buyer-001", NotificationType.ORDER_DELIVERED)
        notify_buyer("buyer-002", NotificationType.ORDER_DELIVERED)
        return first, second

    def test_lists_only_own_notifications(self, buyer, inbox):
        assert {str(n.id) for n in list_notifications(buyer)} == set(inbox)

    def test_limit(self, buyer, inbox):
        assert len(list_notifications(buyer, limit=1)) == 1

    def test_mark_read(self, buyer, inbox):
        first, second = inbox

        result = _mark_read(buyer, first)

        assert result["is_read"] is True
        assert _notification(first).read_at is not None
        assert [str(n.id) for n in list_notifications(buyer, only_unread=True)] == [second]

    def test_marking_twice_keeps_the_first_read_time(self, buyer, inbox):
        _mark_read(buyer, inbox[0])
        read_at = _notification(inbox[0]).read_at

        _mark_read(buyer, inbox[0])

        assert _notification(inbox[0]).read_at == read_at

    def test_cannot_mark_someone_elses(self, inbox):
        other = Actor(user_id="buyer-002", role=Role.READER)

        with pytest.raises(ObjectNotFoundError):
            _mark_read(other, inbox[0])
        assert _notification(inbox[0]).is_read is False

    def test_unknown_notification(self, buyer, inbox):
        with pytest.raises(ObjectNotFoundError):
            _mark_read(buyer, "missing")
