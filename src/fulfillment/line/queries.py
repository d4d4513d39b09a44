"""Read side: a seller's work queue and a line's timeline."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from catalogue.product.product import FulfillmentClass
from fulfillment.history.history import StatusHistory
from ordering.order.line import FulfillmentStatus, OrderLine
from shared.actor import Actor
from shared.errors import AuthorizationError


def seller_queue(actor: Actor, status: str | None = None, seller_id: str | None = None) -> list[OrderLine]:
    """Physical lines owned by the seller, newest first."""
    seller_id = seller_id or actor.user_id
    if not actor.can_act_for(seller_id):
        raise AuthorizationError({"actor": ["Sellers can only view their own orders"]})

    query = current_domain.repository_for(OrderLine)._dao.query.filter(
        seller_id=seller_id,
        fulfillment_class=FulfillmentClass.PHYSICAL.value,
    )
    if status and status != "all":
        try:
            query = query.filter(fulfillment_status=FulfillmentStatus(status).value)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown fulfillment status '{status}'"]}) from exc
    return query.order_by(["-created_at", "id"]).limit(None).all().items


def line_timeline(actor: Actor, order_line_id: str) -> list[StatusHistory]:
    """History of a line, for its buyer, its seller or an admin."""
    line = current_domain.repository_for(OrderLine).get(order_line_id)
    if not (actor.can_act_for(str(line.seller_id)) or actor.user_id == str(line.buyer_id)):
        raise AuthorizationError({"actor": ["You cannot view this order's history"]})
    return current_domain.repository_for(StatusHistory).for_line(str(line.id))
