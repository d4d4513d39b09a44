"""A user's own notifications: listing and marking read."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from notifications.notification.notification import OrderNotification
from shared.actor import Actor
from shared.domain import hekayaty

logger = structlog.get_logger(__name__)

DEFAULT_INBOX_LIMIT = 50


@hekayaty.command(part_of="OrderNotification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=OrderNotification)
class InboxHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        actor = Actor.of(command)
        repo = current_domain.repository_for(OrderNotification)
        notification = repo.get(command.notification_id)
        # Someone else's notification is reported as missing
        if str(notification.user_id) != actor.user_id:
            raise ObjectNotFoundError(f"Notification {command.notification_id} does not exist")

        notification.mark_read()
        repo.add(notification)

        logger.debug("Notification marked read", notification_id=str(notification.id), user_id=actor.user_id)
        return notification.to_dict()


def list_notifications(
    actor: Actor, only_unread: bool = False, limit: int = DEFAULT_INBOX_LIMIT
) -> list[OrderNotification]:
    query = current_domain.repository_for(OrderNotification)._dao.query.filter(user_id=actor.user_id)
    if only_unread:
        query = query.filter(is_read=False)
    return query.order_by(["-created_at", "id"]).limit(limit).all().items
