"""OrderNotification: one message to a user about one of their orders.

Notifications are created by the handlers reacting to settlement and line
events, so they exist only for changes that committed. The in-app record is
what the user reads; the push to their device is tracked separately.

Delivery State Machine:
    PENDING → SENT
    PENDING → FAILED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from notifications.notification.events import NotificationCreated, NotificationFailed, NotificationSent
from shared.domain import hekayaty
from shared.errors import IllegalTransitionError


class NotificationType(Enum):
    ORDER_ACCEPTED = "order_accepted"
    ORDER_PREPARING = "order_preparing"
    ORDER_SHIPPED = "order_shipped"
    ORDER_DELIVERED = "order_delivered"
    ORDER_REJECTED = "order_rejected"
    ORDER_CANCELLED = "order_cancelled"
    PAYMENT_VERIFIED = "payment_verified"
    PAYMENT_REJECTED = "payment_rejected"


class DeliveryStatus(Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


_VALID_TRANSITIONS = {
    DeliveryStatus.PENDING: {DeliveryStatus.SENT, DeliveryStatus.FAILED},
    DeliveryStatus.SENT: set(),  # terminal
    DeliveryStatus.FAILED: set(),  # terminal
}


@hekayaty.aggregate
class OrderNotification:
    user_id = Identifier(required=True)
    order_id = Identifier()
    order_line_id = Identifier()
    type = String(max_length=50, choices=NotificationType, required=True)
    title = String(max_length=255, required=True)
    message = Text(required=True)
    is_read = Boolean(default=False)
    delivery_status = String(max_length=20, choices=DeliveryStatus, default=DeliveryStatus.PENDING.value)
    failure_reason = String(max_length=500)
    created_at = DateTime()
    sent_at = DateTime()
    read_at = DateTime()

    @classmethod
    def create(
        cls,
        user_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        order_id: str | None = None,
        order_line_id: str | None = None,
    ):
        now = datetime.now(UTC)
        notification = cls(
            user_id=user_id,
            order_id=order_id,
            order_line_id=order_line_id,
            type=notification_type.value,
            title=title,
            message=message,
            created_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                user_id=str(user_id),
                type=notification_type.value,
                order_id=order_id,
                order_line_id=order_line_id,
                created_at=now,
            )
        )
        return notification

    def _assert_can_transition(self, target: DeliveryStatus) -> None:
        current = DeliveryStatus(self.delivery_status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise IllegalTransitionError(current.value, target.value, field="delivery_status")

    def mark_sent(self, reference: str | None = None) -> None:
        self._assert_can_transition(DeliveryStatus.SENT)
        now = datetime.now(UTC)
        self.delivery_status = DeliveryStatus.SENT.value
        self.sent_at = now
        self.raise_(
            NotificationSent(notification_id=str(self.id), user_id=str(self.user_id), reference=reference, sent_at=now)
        )

    def mark_failed(self, reason: str) -> None:
        self._assert_can_transition(DeliveryStatus.FAILED)
        now = datetime.now(UTC)
        self.delivery_status = DeliveryStatus.FAILED.value
        self.failure_reason = reason[:500]
        self.raise_(
            NotificationFailed(notification_id=str(self.id), user_id=str(self.user_id), reason=reason, failed_at=now)
        )

    def mark_read(self) -> None:
        if not self.is_read:
            self.is_read = True
            self.read_at = datetime.now(UTC)
