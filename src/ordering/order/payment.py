"""Payment Verification Gate and manual payment rejection.

Verification is the single point where an order's money becomes real: the
order moves to PAID and earnings are realized in the same unit of work. The
order is version-checked, so a retried or concurrent verification fails
with ``IllegalTransitionError`` instead of crediting sellers twice.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from earnings.earning.realization import realize_order_earnings
from ordering.order.line import OrderLine
from ordering.order.order import Order
from shared.actor import Actor, require_admin
from shared.domain import hekayaty
from shared.errors import IllegalTransitionError

logger = structlog.get_logger(__name__)


@hekayaty.command(part_of="Order")
class VerifyPayment:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command(part_of="Order")
class RejectPayment:
    order_id = Identifier(required=True)
    note = Text()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


def order_lines(order_id: str) -> list[OrderLine]:
    repo = current_domain.repository_for(OrderLine)
    return repo._dao.query.filter(order_id=order_id).order_by("position").limit(None).all().items


@hekayaty.command_handler(part_of=Order)
class PaymentHandler:
    @handle(VerifyPayment)
    def verify_payment(self, command: VerifyPayment):
        """Mark a manually paid order as paid and realize its earnings (admin only)."""
        actor = Actor.of(command)
        require_admin(actor, "verify payments")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        try:
            order.mark_paid(verified_by=actor.user_id)
        except IllegalTransitionError:
            logger.info(
                "Payment verification refused",
                order_id=str(order.id),
                current=order.status,
                admin_id=actor.user_id,
            )
            raise

        earnings = realize_order_earnings(order, order_lines(str(order.id)))
        repo.add(order)

        logger.info(
            "Payment verified",
            order_id=str(order.id),
            admin_id=actor.user_id,
            total=order.total_amount,
            earnings=[str(e.id) for e in earnings],
        )
        return order.to_dict()

    @handle(RejectPayment)
    def reject_payment(self, command: RejectPayment):
        """Decline a manual payment; the order becomes REJECTED (admin only)."""
        actor = Actor.of(command)
        require_admin(actor, "reject payments")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.reject_payment((command.note or "").strip() or None)
        repo.add(order)

        logger.info("Payment rejected", order_id=str(order.id), admin_id=actor.user_id)
        return order.to_dict()
