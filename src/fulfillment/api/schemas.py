"""Pydantic API schemas for the Fulfillment domain.

These are the external API contracts, separate from the commands.
The API layer translates between these schemas and commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ordering.api.schemas import OrderLineResponse
from ordering.order.line import MAX_ESTIMATED_DELIVERY_DAYS, MIN_ESTIMATED_DELIVERY_DAYS


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class AcceptLineRequest(BaseModel):
    estimated_delivery_days: int = Field(ge=MIN_ESTIMATED_DELIVERY_DAYS, le=MAX_ESTIMATED_DELIVERY_DAYS)


class ShipLineRequest(BaseModel):
    tracking_number: str
    carrier: str | None = None


class RejectLineRequest(BaseModel):
    reason: str


class CancelLineRequest(BaseModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class QueueEntryResponse(OrderLineResponse):
    order_id: str
    created_at: datetime
    shipping_address: dict | None = None


class QueueResponse(BaseModel):
    lines: list[QueueEntryResponse]


class HistoryEntryResponse(BaseModel):
    id: int
    status: str
    note: str | None
    actor_id: str | None
    created_at: datetime


class TimelineResponse(BaseModel):
    order_line_id: str
    history: list[HistoryEntryResponse]
