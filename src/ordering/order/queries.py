"""Read side for orders: a buyer's orders, one order, the admin queue."""

from dataclasses import dataclass, field

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.order.line import OrderLine
from ordering.order.order import Order, SettlementStatus
from ordering.order.payment import order_lines
from shared.actor import Actor, require_admin
from shared.errors import AuthorizationError


@dataclass
class OrderView:
    """An order together with its lines."""

    order: Order
    lines: list[OrderLine] = field(default_factory=list)

    @property
    def seller_ids(self) -> list[str]:
        return sorted({str(line.seller_id) for line in self.lines})


def _with_lines(orders: list[Order]) -> list[OrderView]:
    if not orders:
        return []
    repo = current_domain.repository_for(OrderLine)
    by_order: dict[str, list[OrderLine]] = {str(o.id): [] for o in orders}
    for line in repo._dao.query.filter(order_id__in=list(by_order)).order_by("position").limit(None).all().items:
        by_order[str(line.order_id)].append(line)
    return [OrderView(order=o, lines=by_order[str(o.id)]) for o in orders]


def get_order(actor: Actor, order_id: str) -> OrderView:
    """One order, visible to its buyer, an admin, or a seller with a line in it."""
    order = current_domain.repository_for(Order).get(order_id)
    view = OrderView(order=order, lines=order_lines(str(order.id)))
    if not (actor.is_admin or actor.user_id == str(order.buyer_id) or actor.user_id in view.seller_ids):
        raise AuthorizationError({"actor": ["You cannot view this order"]})
    return view


def list_buyer_orders(actor: Actor) -> list[OrderView]:
    repo = current_domain.repository_for(Order)
    orders = repo._dao.query.filter(buyer_id=actor.user_id).order_by(["-created_at", "id"]).limit(None).all().items
    return _with_lines(orders)


def list_orders_by_status(actor: Actor, status: str = SettlementStatus.PENDING.value) -> list[OrderView]:
    """Orders in a settlement status, newest first; ``all`` lists everything (admin only)."""
    require_admin(actor, "list orders")
    query = current_domain.repository_for(Order)._dao.query
    if status != "all":
        try:
            query = query.filter(status=SettlementStatus(status).value)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown order status '{status}'"]}) from exc
    return _with_lines(query.order_by(["-created_at", "id"]).limit(None).all().items)
