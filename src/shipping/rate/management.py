"""Sellers maintain their own shipping rate tables."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from shared.actor import Actor, Role
from shared.domain import hekayaty
from shared.errors import AuthorizationError
from shipping.rate.rate import ShippingRate

logger = structlog.get_logger(__name__)


@hekayaty.command(part_of="ShippingRate")
class DefineShippingRate:
    region_name = String(max_length=100)
    amount = Integer(required=True)
    delivery_time_min = Integer()
    delivery_time_max = Integer()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command(part_of="ShippingRate")
class DeleteShippingRate:
    rate_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=ShippingRate)
class ShippingRateHandler:
    @handle(DefineShippingRate)
    def define_rate(self, command):
        actor = Actor.of(command)
        if actor.role is Role.READER:
            raise AuthorizationError({"actor": ["Only sellers can define shipping rates"]})

        rate = ShippingRate.define(
            seller_id=actor.user_id,
            region_name=command.region_name,
            amount=command.amount,
            delivery_time_min=command.delivery_time_min,
            delivery_time_max=command.delivery_time_max,
        )
        current_domain.repository_for(ShippingRate).add(rate)

        logger.info("Shipping rate created", rate_id=str(rate.id), seller_id=actor.user_id, region=rate.region_name)
        return str(rate.id)

    @handle(DeleteShippingRate)
    def delete_rate(self, command):
        actor = Actor.of(command)
        repo = current_domain.repository_for(ShippingRate)
        rate = repo.get(command.rate_id)
        if not actor.can_act_for(rate.seller_id):
            raise AuthorizationError({"actor": ["Only the owning seller can delete this rate"]})
        repo._dao.delete(rate)

        logger.info("Shipping rate deleted", rate_id=str(command.rate_id), actor_id=actor.user_id)


def list_rates(seller_id: str) -> list[ShippingRate]:
    """A seller's rates in a stable order (region, then creation)."""
    repo = current_domain.repository_for(ShippingRate)
    query = repo._dao.query.filter(seller_id=seller_id).order_by(["region_name", "created_at", "id"])
    return query.limit(None).all().items
