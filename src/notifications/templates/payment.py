"""Templates for settlement changes of an order."""

from notifications.notification.notification import NotificationType


class PaymentVerifiedTemplate:
    notification_type = NotificationType.PAYMENT_VERIFIED.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Payment Confirmed",
            "message": f"Your payment of {context.get('amount')} {context.get('currency', 'EGP')} has been verified.",
        }


class PaymentRejectedTemplate:
    notification_type = NotificationType.PAYMENT_REJECTED.value

    @staticmethod
    def render(context: dict) -> dict:
        note = context.get("note")
        message = "We could not verify your payment."
        if note:
            message = f"{message} {note}"
        return {"title": "Payment Rejected", "message": message}
