"""Pydantic API schemas for the Notifications domain.

These are the external API contracts, separate from the entities.
"""

from datetime import datetime

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: str
    order_id: str | None
    order_line_id: str | None
    type: str
    title: str
    message: str
    is_read: bool
    delivery_status: str
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread_count: int
