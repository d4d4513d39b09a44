"""Templates for the fulfillment lifecycle of a physical order line."""

from notifications.notification.notification import NotificationType


class OrderAcceptedTemplate:
    notification_type = NotificationType.ORDER_ACCEPTED.value

    @staticmethod
    def render(context: dict) -> dict:
        days = context.get("estimated_delivery_days")
        return {
            "title": "Order Accepted",
            "message": f"Your order has been accepted! Estimated delivery: {days} days",
        }


class OrderPreparingTemplate:
    notification_type = NotificationType.ORDER_PREPARING.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Being Prepared",
            "message": "The seller is preparing your order for shipment.",
        }


class OrderShippedTemplate:
    notification_type = NotificationType.ORDER_SHIPPED.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Shipped!",
            "message": f"Your order is on the way! Tracking number: {context.get('tracking_number', 'N/A')}",
        }


class OrderDeliveredTemplate:
    notification_type = NotificationType.ORDER_DELIVERED.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Delivered!",
            "message": "Your order has been delivered. Enjoy your purchase!",
        }


class OrderRejectedTemplate:
    notification_type = NotificationType.ORDER_REJECTED.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Rejected",
            "message": f"Your order was rejected. Reason: {context.get('reason', '')}",
        }


class OrderCancelledTemplate:
    notification_type = NotificationType.ORDER_CANCELLED.value

    @staticmethod
    def render(context: dict) -> dict:
        reason = context.get("reason")
        message = "Your order was cancelled."
        if reason:
            message = f"{message} Reason: {reason}"
        return {"title": "Order Cancelled", "message": message}
