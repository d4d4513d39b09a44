"""Notifications react to order line fulfillment events.

Each transition of a physical line tells its buyer what happened.
"""

from protean import handle

from notifications.notification.helpers import notify_buyer
from notifications.notification.notification import NotificationType, OrderNotification
from ordering.order.events import (
    LineAccepted,
    LineCancelled,
    LineDelivered,
    LinePreparing,
    LineRejected,
    LineShipped,
)
from shared.domain import hekayaty


def _notify(event, notification_type: NotificationType, **context) -> None:
    notify_buyer(
        str(event.buyer_id),
        notification_type,
        context,
        order_id=str(event.order_id),
        order_line_id=str(event.order_line_id),
    )


@hekayaty.event_handler(part_of=OrderNotification, stream_category="hekayaty::order_line")
class FulfillmentEventsHandler:
    @handle(LineAccepted)
    def on_line_accepted(self, event: LineAccepted) -> None:
        _notify(event, NotificationType.ORDER_ACCEPTED, estimated_delivery_days=event.estimated_delivery_days)

    @handle(LinePreparing)
    def on_line_preparing(self, event: LinePreparing) -> None:
        _notify(event, NotificationType.ORDER_PREPARING)

    @handle(LineShipped)
    def on_line_shipped(self, event: LineShipped) -> None:
        _notify(event, NotificationType.ORDER_SHIPPED, tracking_number=event.tracking_number, carrier=event.carrier)

    @handle(LineDelivered)
    def on_line_delivered(self, event: LineDelivered) -> None:
        _notify(event, NotificationType.ORDER_DELIVERED)

    @handle(LineRejected)
    def on_line_rejected(self, event: LineRejected) -> None:
        _notify(event, NotificationType.ORDER_REJECTED, reason=event.reason)

    @handle(LineCancelled)
    def on_line_cancelled(self, event: LineCancelled) -> None:
        _notify(event, NotificationType.ORDER_CANCELLED, reason=event.reason)
