"""Seller hands an accepted or preparing line to a carrier."""

from protean import handle
from protean.fields import Identifier, String

from fulfillment.line.lifecycle import transition_line
from ordering.order.line import OrderLine
from shared.actor import Actor
from shared.domain import hekayaty


@hekayaty.command(part_of="OrderLine")
class ShipLine:
    order_line_id = Identifier(required=True)
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


def _shipping_note(line: OrderLine) -> str:
    if line.carrier:
        return f"Shipped via {line.carrier}. Tracking: {line.tracking_number}"
    return f"Tracking: {line.tracking_number}"


@hekayaty.command_handler(part_of=OrderLine)
class ShippingHandler:
    @handle(ShipLine)
    def ship_line(self, command: ShipLine):
        line = transition_line(
            Actor.of(command),
            command.order_line_id,
            apply=lambda line: line.ship(command.tracking_number, command.carrier),
            note=_shipping_note,
        )
        return line.to_dict()
