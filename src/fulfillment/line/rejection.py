"""Seller rejects a pending or accepted line, with a reason the buyer sees."""

from protean import handle
from protean.fields import Identifier, String, Text

from fulfillment.line.lifecycle import transition_line
from ordering.order.line import OrderLine
from shared.actor import Actor
from shared.domain import hekayaty


@hekayaty.command(part_of="OrderLine")
class RejectLine:
    order_line_id = Identifier(required=True)
    reason = Text()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=OrderLine)
class RejectionHandler:
    @handle(RejectLine)
    def reject_line(self, command: RejectLine):
        line = transition_line(
            Actor.of(command),
            command.order_line_id,
            apply=lambda line: line.reject(command.reason),
            note=lambda line: line.rejection_reason,
        )
        return line.to_dict()
