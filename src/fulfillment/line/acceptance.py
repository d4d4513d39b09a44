"""Seller accepts a pending physical order line with a delivery estimate."""

from protean import handle
from protean.fields import Identifier, Integer, String

from fulfillment.line.lifecycle import transition_line
from ordering.order.line import OrderLine
from shared.actor import Actor
from shared.domain import hekayaty


@hekayaty.command(part_of="OrderLine")
class AcceptLine:
    order_line_id = Identifier(required=True)
    estimated_delivery_days = Integer()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=OrderLine)
class AcceptLineHandler:
    @handle(AcceptLine)
    def accept_line(self, command: AcceptLine):
        line = transition_line(
            Actor.of(command),
            command.order_line_id,
            apply=lambda line: line.accept(command.estimated_delivery_days),
            note=lambda line: f"Estimated delivery: {line.estimated_delivery_days} days",
        )
        return line.to_dict()
