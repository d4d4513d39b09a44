"""Template registry: maps NotificationType to template classes.

Each template renders a title and message from the context of the change
that triggered it.
"""

from notifications.notification.notification import NotificationType
from notifications.templates.fulfillment import (
    OrderAcceptedTemplate,
    OrderCancelledTemplate,
    OrderDeliveredTemplate,
    OrderPreparingTemplate,
    OrderRejectedTemplate,
    OrderShippedTemplate,
)
from notifications.templates.payment import PaymentRejectedTemplate, PaymentVerifiedTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_ACCEPTED.value: OrderAcceptedTemplate,
    NotificationType.ORDER_PREPARING.value: OrderPreparingTemplate,
    NotificationType.ORDER_SHIPPED.value: OrderShippedTemplate,
    NotificationType.ORDER_DELIVERED.value: OrderDeliveredTemplate,
    NotificationType.ORDER_REJECTED.value: OrderRejectedTemplate,
    NotificationType.ORDER_CANCELLED.value: OrderCancelledTemplate,
    NotificationType.PAYMENT_VERIFIED.value: PaymentVerifiedTemplate,
    NotificationType.PAYMENT_REJECTED.value: PaymentRejectedTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
