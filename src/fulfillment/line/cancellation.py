"""Cancel a line that has not shipped yet."""

from protean import handle
from protean.fields import Identifier, String, Text

from fulfillment.line.lifecycle import transition_line
from ordering.order.line import OrderLine
from shared.actor import Actor
from shared.domain import hekayaty


@hekayaty.command(part_of="OrderLine")
class CancelLine:
    order_line_id = Identifier(required=True)
    reason = Text()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=OrderLine)
class CancellationHandler:
    @handle(CancelLine)
    def cancel_line(self, command: CancelLine):
        line = transition_line(
            Actor.of(command),
            command.order_line_id,
            apply=lambda line: line.cancel(command.reason),
            note=lambda line: line.cancellation_reason or "Order cancelled",
        )
        return line.to_dict()
