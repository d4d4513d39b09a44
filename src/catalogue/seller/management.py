"""Admin management of seller accounts: freezing and commission rates."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from catalogue.seller.seller import Seller
from shared.actor import Actor, require_admin
from shared.domain import hekayaty

logger = structlog.get_logger(__name__)


@hekayaty.command(part_of="Seller")
class SetSellerActive:
    """Freeze (``is_active=False``) or unfreeze a seller account."""

    seller_id = Identifier(required=True)
    is_active = Boolean(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command(part_of="Seller")
class SetCommissionRate:
    """Set a seller's digital commission rate in percent; None restores the default."""

    seller_id = Identifier(required=True)
    commission_rate = Integer()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=Seller)
class SellerManagementHandler:
    @handle(SetSellerActive)
    def set_active(self, command):
        actor = Actor.of(command)
        require_admin(actor, "freeze or unfreeze sellers")

        repo = current_domain.repository_for(Seller)
        seller = repo.get(command.seller_id)
        if command.is_active:
            seller.unfreeze()
        else:
            seller.freeze()
        repo.add(seller)

        logger.info(
            "Seller active flag changed",
            seller_id=str(seller.id),
            is_active=seller.is_active,
            admin_id=actor.user_id,
        )
        return seller.to_dict()

    @handle(SetCommissionRate)
    def set_commission_rate(self, command):
        actor = Actor.of(command)
        require_admin(actor, "change commission rates")

        repo = current_domain.repository_for(Seller)
        seller = repo.get(command.seller_id)
        seller.set_commission_rate(command.commission_rate)
        repo.add(seller)

        logger.info(
            "Seller commission rate changed",
            seller_id=str(seller.id),
            rate=seller.commission_rate,
            admin_id=actor.user_id,
        )
        return seller.to_dict()
