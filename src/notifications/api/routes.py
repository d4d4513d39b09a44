"""FastAPI routes for the Notifications domain."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from notifications.api.schemas import NotificationListResponse, NotificationResponse
from notifications.notification.inbox import MarkNotificationRead, list_notifications
from shared.actor import Actor
from shared.http import get_actor

notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("", response_model=NotificationListResponse)
async def my_notifications(only_unread: bool = False, actor: Actor = Depends(get_actor)) -> NotificationListResponse:
    notifications = list_notifications(actor, only_unread=only_unread)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n.to_dict()) for n in notifications],
        unread_count=sum(1 for n in notifications if not n.is_read),
    )


@notification_router.put("/{notification_id}/read", response_model=NotificationResponse)
async def read(notification_id: str, actor: Actor = Depends(get_actor)) -> NotificationResponse:
    command = MarkNotificationRead(notification_id=notification_id, **actor.as_fields())
    return NotificationResponse.model_validate(current_domain.process(command, asynchronous=False))
