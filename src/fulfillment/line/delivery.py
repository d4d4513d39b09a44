"""Seller or admin confirms delivery of a shipped line."""

from protean import handle
from protean.fields import Identifier, String

from fulfillment.line.lifecycle import transition_line
from ordering.order.line import OrderLine
from shared.actor import Actor
from shared.domain import hekayaty


@hekayaty.command(part_of="OrderLine")
class MarkDelivered:
    order_line_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=OrderLine)
class DeliveryHandler:
    @handle(MarkDelivered)
    def mark_delivered(self, command: MarkDelivered):
        line = transition_line(
            Actor.of(command),
            command.order_line_id,
            apply=lambda line: line.deliver(),
            note=lambda line: "Order successfully delivered",
        )
        return line.to_dict()
