"""Domain events for the OrderNotification aggregate."""

from protean.fields import DateTime, Identifier, String

from shared.domain import hekayaty


@hekayaty.event(part_of="OrderNotification")
class NotificationCreated:
    """A notification was recorded and awaits delivery to the user's device."""

    __version__ = 1

    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)
    type = String(required=True)
    order_id = Identifier()
    order_line_id = Identifier()
    created_at = DateTime(required=True)


@hekayaty.event(part_of="OrderNotification")
class NotificationSent:
    __version__ = 1

    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reference = String()
    sent_at = DateTime(required=True)


@hekayaty.event(part_of="OrderNotification")
class NotificationFailed:
    __version__ = 1

    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(required=True)
    failed_at = DateTime(required=True)
