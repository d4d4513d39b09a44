"""FastAPI routes for the Fulfillment domain."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from fulfillment.api.schemas import (
    AcceptLineRequest,
    CancelLineRequest,
    HistoryEntryResponse,
    QueueEntryResponse,
    QueueResponse,
    RejectLineRequest,
    ShipLineRequest,
    TimelineResponse,
)
from fulfillment.line.acceptance import AcceptLine
from fulfillment.line.cancellation import CancelLine
from fulfillment.line.delivery import MarkDelivered
from fulfillment.line.preparation import StartPreparing
from fulfillment.line.queries import line_timeline, seller_queue
from fulfillment.line.rejection import RejectLine
from fulfillment.line.shipping import ShipLine
from ordering.api.schemas import OrderLineResponse
from ordering.order.line import OrderLine
from ordering.order.order import Order
from shared.actor import Actor
from shared.http import get_actor

# ---------------------------------------------------------------------------
# Fulfillment Router
# ---------------------------------------------------------------------------
fulfillment_router = APIRouter(prefix="/fulfillment/lines", tags=["fulfillment"])


def _queue(lines: list[OrderLine]) -> list[QueueEntryResponse]:
    order_ids = sorted({str(line.order_id) for line in lines})
    orders = current_domain.repository_for(Order)._dao.query.filter(id__in=order_ids).limit(None).all().items
    addresses = {str(o.id): o.to_dict().get("shipping_address") for o in orders}
    return [
        QueueEntryResponse.model_validate({**line.to_dict(), "shipping_address": addresses.get(str(line.order_id))})
        for line in lines
    ]


def _process(command) -> OrderLineResponse:
    return OrderLineResponse.model_validate(current_domain.process(command, asynchronous=False))


@fulfillment_router.get("", response_model=QueueResponse)
async def queue(
    status: str | None = None,
    seller_id: str | None = None,
    actor: Actor = Depends(get_actor),
) -> QueueResponse:
    """The seller's physical order lines, optionally filtered by status."""
    lines = seller_queue(actor, status=status, seller_id=seller_id)
    return QueueResponse(lines=_queue(lines) if lines else [])


@fulfillment_router.get("/{order_line_id}/history", response_model=TimelineResponse)
async def history(order_line_id: str, actor: Actor = Depends(get_actor)) -> TimelineResponse:
    entries = line_timeline(actor, order_line_id)
    return TimelineResponse(
        order_line_id=order_line_id,
        history=[HistoryEntryResponse.model_validate(e.to_dict()) for e in entries],
    )


@fulfillment_router.put("/{order_line_id}/accept", response_model=OrderLineResponse)
async def accept(order_line_id: str, body: AcceptLineRequest, actor: Actor = Depends(get_actor)) -> OrderLineResponse:
    """Accept a pending line with a delivery estimate."""
    return _process(
        AcceptLine(
            order_line_id=order_line_id,
            estimated_delivery_days=body.estimated_delivery_days,
            **actor.as_fields(),
        )
    )


@fulfillment_router.put("/{order_line_id}/prepare", response_model=OrderLineResponse)
async def prepare(order_line_id: str, actor: Actor = Depends(get_actor)) -> OrderLineResponse:
    return _process(StartPreparing(order_line_id=order_line_id, **actor.as_fields()))


@fulfillment_router.put("/{order_line_id}/ship", response_model=OrderLineResponse)
async def ship(order_line_id: str, body: ShipLineRequest, actor: Actor = Depends(get_actor)) -> OrderLineResponse:
    """Record the carrier handoff with a tracking number."""
    return _process(
        ShipLine(
            order_line_id=order_line_id,
            tracking_number=body.tracking_number,
            carrier=body.carrier,
            **actor.as_fields(),
        )
    )


@fulfillment_router.put("/{order_line_id}/deliver", response_model=OrderLineResponse)
async def deliver(order_line_id: str, actor: Actor = Depends(get_actor)) -> OrderLineResponse:
    return _process(MarkDelivered(order_line_id=order_line_id, **actor.as_fields()))


@fulfillment_router.put("/{order_line_id}/reject", response_model=OrderLineResponse)
async def reject(order_line_id: str, body: RejectLineRequest, actor: Actor = Depends(get_actor)) -> OrderLineResponse:
    return _process(RejectLine(order_line_id=order_line_id, reason=body.reason, **actor.as_fields()))


@fulfillment_router.put("/{order_line_id}/cancel", response_model=OrderLineResponse)
async def cancel(
    order_line_id: str,
    body: CancelLineRequest | None = None,
    actor: Actor = Depends(get_actor),
) -> OrderLineResponse:
    reason = body.reason if body else None
    return _process(CancelLine(order_line_id=order_line_id, reason=reason, **actor.as_fields()))
