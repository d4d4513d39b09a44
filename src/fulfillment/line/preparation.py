"""Seller starts preparing an accepted order line."""

from protean import handle
from protean.fields import Identifier, String

from fulfillment.line.lifecycle import transition_line
from ordering.order.line import OrderLine
from shared.actor import Actor
from shared.domain import hekayaty


@hekayaty.command(part_of="OrderLine")
class StartPreparing:
    order_line_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=OrderLine)
class PreparationHandler:
    @handle(StartPreparing)
    def start_preparing(self, command: StartPreparing):
        line = transition_line(
            Actor.of(command),
            command.order_line_id,
            apply=lambda line: line.start_preparing(),
            note=lambda line: "Order is being prepared",
        )
        return line.to_dict()
