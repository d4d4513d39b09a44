"""Render a template and record the notification for a buyer."""

import structlog
from protean.utils.globals import current_domain

from notifications.notification.notification import NotificationType, OrderNotification
from notifications.templates import get_template

logger = structlog.get_logger(__name__)


def notify_buyer(
    user_id: str,
    notification_type: NotificationType,
    context: dict | None = None,
    order_id: str | None = None,
    order_line_id: str | None = None,
) -> str:
    """Record one notification for ``user_id``. Returns its id."""
    content = get_template(notification_type.value).render(context or {})
    notification = OrderNotification.create(
        user_id=user_id,
        notification_type=notification_type,
        title=content["title"],
        message=content["message"],
        order_id=order_id,
        order_line_id=order_line_id,
    )
    current_domain.repository_for(OrderNotification).add(notification)

    logger.info(
        "Notification created",
        notification_id=str(notification.id),
        user_id=user_id,
        type=notification_type.value,
        order_id=order_id,
    )
    return str(notification.id)
