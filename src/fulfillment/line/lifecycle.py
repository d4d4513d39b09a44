"""Shared machinery for order line transitions.

Every transition loads the line, checks that the actor is the owning seller
or an admin, applies the state change on the aggregate and appends one
history entry, all in the handler's unit of work. The line's version guards
the write: a writer that loses the race to a concurrent transition is
retried against the fresh line, where the state machine refuses the move.
The buyer is notified from the line's events once the work commits.
"""

from collections.abc import Callable

import structlog
from protean.utils.globals import current_domain

from fulfillment.history.history import StatusHistory
from ordering.order.line import OrderLine
from shared.actor import Actor
from shared.errors import AuthorizationError, IllegalTransitionError

logger = structlog.get_logger(__name__)


def authorize(actor: Actor, line: OrderLine) -> None:
    if not actor.can_act_for(str(line.seller_id)):
        raise AuthorizationError({"actor": ["Only the owning seller or an admin can update this order"]})


def transition_line(
    actor: Actor,
    order_line_id: str,
    apply: Callable[[OrderLine], None],
    note: Callable[[OrderLine], str | None],
) -> OrderLine:
    repo = current_domain.repository_for(OrderLine)
    line = repo.get(order_line_id)
    authorize(actor, line)

    previous = line.fulfillment_status
    try:
        apply(line)
    except IllegalTransitionError:
        logger.warning(
            "Illegal order line transition",
            order_line_id=str(line.id),
            order_id=str(line.order_id),
            actor_id=actor.user_id,
            current=previous,
            fulfillment_class=line.fulfillment_class,
        )
        raise

    repo.add(line)
    current_domain.repository_for(StatusHistory).append(
        str(line.id), line.fulfillment_status, note(line), actor.user_id
    )

    logger.info(
        "Order line transitioned",
        order_line_id=str(line.id),
        order_id=str(line.order_id),
        seller_id=str(line.seller_id),
        actor_id=actor.user_id,
        from_status=previous,
        to_status=line.fulfillment_status,
    )
    return line
