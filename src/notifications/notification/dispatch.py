"""Push dispatch: delivers recorded notifications to the user's device.

Reacts to NotificationCreated, hands the notification to the push channel
and records the outcome on the notification. A channel failure never
undoes the notification: the user still finds it in their inbox.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from notifications.channel import get_channel
from notifications.notification.events import NotificationCreated
from notifications.notification.notification import DeliveryStatus, OrderNotification
from shared.domain import hekayaty

logger = structlog.get_logger(__name__)


@hekayaty.event_handler(part_of=OrderNotification)
class NotificationDispatcher:
    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        repo = current_domain.repository_for(OrderNotification)
        try:
            notification = repo.get(event.notification_id)
        except ObjectNotFoundError:
            logger.error("Notification to dispatch is missing", notification_id=str(event.notification_id))
            return

        if notification.delivery_status != DeliveryStatus.PENDING.value:
            return

        try:
            receipt = get_channel().deliver(
                recipient=str(notification.user_id),
                heading=notification.title,
                text=notification.message,
                payload={
                    "notification_id": str(notification.id),
                    "type": notification.type,
                    "order_id": str(notification.order_id) if notification.order_id else None,
                    "order_line_id": str(notification.order_line_id) if notification.order_line_id else None,
                },
            )
        except Exception as exc:
            logger.error("Notification dispatch failed", notification_id=str(notification.id), error=str(exc))
            notification.mark_failed(str(exc) or exc.__class__.__name__)
        else:
            if receipt.delivered:
                notification.mark_sent(receipt.reference)
                logger.debug(
                    "Notification dispatched", notification_id=str(notification.id), reference=receipt.reference
                )
            else:
                logger.warning(
                    "Notification dispatch failed",
                    notification_id=str(notification.id),
                    error=receipt.error,
                )
                notification.mark_failed(receipt.error or "Push delivery failed")

        repo.add(notification)
