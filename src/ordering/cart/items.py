"""Add, list, remove and clear a buyer's cart lines."""

import structlog
from protean import handle
from protean.fields import Dict, Identifier, Integer, String
from protean.utils.globals import current_domain

from catalogue.pricing import resolve_price
from ordering.cart.cart import CartItem, CartLine
from shared.actor import Actor
from shared.domain import hekayaty
from shared.errors import AuthorizationError

logger = structlog.get_logger(__name__)


@hekayaty.command(part_of="CartItem")
class AddToCart:
    product_id = Identifier()
    variant_id = Identifier()
    collection_id = Identifier()
    quantity = Integer(default=1)
    customization = Dict()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command(part_of="CartItem")
class RemoveCartItem:
    cart_item_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=CartItem)
class CartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        actor = Actor.of(command)
        line = CartLine(
            quantity=command.quantity,
            product_id=command.product_id,
            variant_id=command.variant_id,
            collection_id=command.collection_id,
            customization=command.customization or None,
        )
        line.validate()
        # Refuse references that are already gone
        resolve_price(line.product_id, line.variant_id, line.collection_id)

        item = CartItem(
            buyer_id=actor.user_id,
            product_id=line.product_id,
            variant_id=line.variant_id,
            collection_id=line.collection_id,
            quantity=line.quantity,
            customization=line.customization,
        )
        current_domain.repository_for(CartItem).add(item)

        logger.info(
            "Cart item added",
            buyer_id=actor.user_id,
            cart_item_id=str(item.id),
            product_id=line.product_id,
            collection_id=line.collection_id,
            quantity=line.quantity,
        )
        return str(item.id)

    @handle(RemoveCartItem)
    def remove_from_cart(self, command):
        actor = Actor.of(command)
        repo = current_domain.repository_for(CartItem)
        item = repo.get(command.cart_item_id)
        if str(item.buyer_id) != actor.user_id:
            raise AuthorizationError({"actor": ["Cart items can only be removed by their owner"]})
        repo._dao.delete(item)

        logger.info("Cart item removed", buyer_id=actor.user_id, cart_item_id=str(command.cart_item_id))


def list_cart(buyer_id: str) -> list[CartItem]:
    repo = current_domain.repository_for(CartItem)
    return repo._dao.query.filter(buyer_id=buyer_id).order_by(["created_at", "id"]).limit(None).all().items


def clear_cart(buyer_id: str) -> int:
    """Delete every cart line of ``buyer_id`` in the caller's unit of work."""
    repo = current_domain.repository_for(CartItem)
    return repo._dao.query.filter(buyer_id=buyer_id).limit(None).delete()
