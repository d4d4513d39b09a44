"""Notifications react to settlement events of an order.

``PaymentVerified`` is raised both by the admin verification gate and by
checkout for methods that settle at once, so every paid order tells its
buyer exactly once.
"""

from protean import handle

from notifications.notification.helpers import notify_buyer
from notifications.notification.notification import NotificationType, OrderNotification
from ordering.order.events import PaymentRejected, PaymentVerified
from shared.domain import hekayaty


@hekayaty.event_handler(part_of=OrderNotification, stream_category="hekayaty::order")
class OrderingEventsHandler:
    @handle(PaymentVerified)
    def on_payment_verified(self, event: PaymentVerified) -> None:
        notify_buyer(
            str(event.buyer_id),
            NotificationType.PAYMENT_VERIFIED,
            {"amount": event.total_amount, "currency": hekayaty.currency},
            order_id=str(event.order_id),
        )

    @handle(PaymentRejected)
    def on_payment_rejected(self, event: PaymentRejected) -> None:
        notify_buyer(
            str(event.buyer_id),
            NotificationType.PAYMENT_REJECTED,
            {"note": event.note},
            order_id=str(event.order_id),
        )
