"""Order Orchestrator: checkout.

    PlaceOrder(cart_lines, payment_method, proof, shipping_address, ...) -> [order_id]

Pricing, seller checks, the authoritative shipping allocation, partitioning,
order and line creation, earnings for auto-paid orders and clearing the
stored cart all happen in one unit of work: either every order is written or
none is.

Stock is taken afterwards by ``StockReservationHandler`` reacting to
``OrderPlaced``. A decrement that loses a race emits ``StockRaceWarning`` and
is logged; the orders stand.
"""

from collections.abc import Mapping, Sequence
from uuid import uuid4

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Dict, Identifier, Integer, List, String
from protean.utils.globals import current_domain

from catalogue.pricing import resolve_price
from catalogue.product.product import FulfillmentClass
from catalogue.seller.seller import Seller
from earnings.earning.realization import realize_order_earnings
from fulfillment.history.history import StatusHistory
from ordering.cart.cart import CartLine
from ordering.cart.items import clear_cart
from ordering.checkout.partition import ResolvedLine, SubOrderDraft, partition_cart, physical_item_counts
from ordering.order.line import OrderLine
from ordering.order.order import Order, ShippingAddress, ShippingCharge
from shared.actor import Actor
from shared.domain import hekayaty
from shared.errors import InvalidCartError, StaleReferenceError
from shipping.allocation import ShippingQuote, quote_shipping

logger = structlog.get_logger(__name__)

ORDER_PLACED_NOTE = "Order placed"


def is_manual_method(payment_method: str) -> bool:
    return payment_method in hekayaty.manual_payment_methods


@hekayaty.command(part_of="Order")
class PlaceOrder:
    """Turn the buyer's cart into one order per fulfillment class.

    ``shipping_cost`` and ``shipping_breakdown`` are what the buyer was quoted;
    checkout refuses to charge anything else.
    """

    cart_lines = List()
    payment_method = String(max_length=50)
    proof = String(max_length=1000)
    payment_reference = String(max_length=255)
    shipping_address = Dict()
    shipping_cost = Integer()
    shipping_breakdown = Dict()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


def _cart_lines(raw: Sequence) -> list[CartLine]:
    if not raw:
        raise InvalidCartError({"cart_lines": ["Cart is empty"]})
    lines = []
    for item in raw:
        if isinstance(item, CartLine):
            line = item
        elif isinstance(item, Mapping):
            line = CartLine.from_dict(dict(item))
        else:
            raise InvalidCartError({"cart_lines": [f"Unrecognized cart line: {item!r}"]})
        line.validate()
        lines.append(line)
    return lines


def _shipping_address(raw: Mapping | None) -> ShippingAddress | None:
    if not raw:
        return None
    return ShippingAddress(
        full_name=raw.get("full_name"),
        phone_number=raw.get("phone_number"),
        city=raw.get("city"),
        address_line=raw.get("address_line"),
    )


def _load_sellers(seller_ids: set[str]) -> dict[str, Seller]:
    repo = current_domain.repository_for(Seller)
    sellers = {str(s.id): s for s in repo._dao.query.filter(id__in=sorted(seller_ids)).limit(None).all().items}

    missing = sorted(seller_ids - sellers.keys())
    if missing:
        raise StaleReferenceError({"seller_id": [f"Seller {seller_id} no longer exists" for seller_id in missing]})

    frozen = sorted(seller_id for seller_id, s in sellers.items() if not s.is_active)
    if frozen:
        raise ValidationError({"seller_id": [f"Seller {seller_id} is not accepting orders" for seller_id in frozen]})
    return sellers


def _authoritative_shipping(
    lines: Sequence[ResolvedLine],
    shipping_address: ShippingAddress | None,
    quoted_shipping_cost: int | None,
    quoted_breakdown: Mapping[str, int] | None = None,
) -> ShippingQuote | None:
    item_counts = physical_item_counts(lines)
    if not item_counts:
        if quoted_shipping_cost:
            raise ValidationError({"shipping_cost": ["Shipping was quoted for a cart with no physical items"]})
        return None

    if shipping_address is None or not (shipping_address.city or "").strip():
        raise ValidationError({"shipping_address": ["A shipping address with a city is required for physical items"]})

    quote = quote_shipping(shipping_address.city, item_counts)

    if quote.unresolved_sellers and hekayaty.require_resolved_region:
        raise ValidationError(
            {
                "shipping_address": [
                    f"Seller {seller_id} does not ship to {shipping_address.city}"
                    for seller_id in quote.unresolved_sellers
                ]
            }
        )

    if quoted_shipping_cost is not None and quoted_shipping_cost != quote.total:
        logger.warning(
            "Shipping quote drifted",
            region=shipping_address.city,
            quoted=quoted_shipping_cost,
            charged=quote.total,
        )
        raise ValidationError({"shipping_cost": ["Shipping cost changed since it was quoted. Please review your cart"]})

    charged = {seller_id: a.amount for seller_id, a in quote.allocations.items()}
    if quoted_breakdown and dict(quoted_breakdown) != charged:
        logger.warning(
            "Shipping breakdown drifted",
            region=shipping_address.city,
            quoted=dict(quoted_breakdown),
            charged=charged,
        )
        raise ValidationError(
            {"shipping_breakdown": ["Shipping charges changed since they were quoted. Please review your cart"]}
        )

    return quote


def _build_order(
    draft: SubOrderDraft,
    checkout_id: str,
    buyer_id: str,
    command: PlaceOrder,
    shipping_address: ShippingAddress | None,
) -> tuple[Order, list[OrderLine]]:
    physical = draft.fulfillment_class is FulfillmentClass.PHYSICAL
    order = Order.create(
        checkout_id=checkout_id,
        buyer_id=buyer_id,
        fulfillment_class=draft.fulfillment_class,
        total_amount=draft.total,
        platform_fee=draft.platform_fee,
        seller_earnings=draft.seller_earnings,
        shipping_cost=draft.shipping_cost,
        payment_method=command.payment_method,
        payment_proof_url=command.proof,
        payment_reference=command.payment_reference,
        shipping_address=shipping_address if physical else None,
    )
    for seller_id, allocation in sorted(draft.shipping.items()):
        order.add_shipping_charges(
            ShippingCharge(
                seller_id=seller_id,
                amount=allocation.amount,
                region_label=allocation.region_label,
                delivery_min_days=allocation.delivery_min_days,
                delivery_max_days=allocation.delivery_max_days,
            )
        )

    lines = []
    for position, drafted in enumerate(draft.lines):
        resolved = drafted.line
        lines.append(
            OrderLine.create(
                draft.fulfillment_class,
                order_id=str(order.id),
                position=position,
                product_id=resolved.priced.product_id,
                variant_id=resolved.priced.variant_id,
                collection_id=resolved.priced.collection_id,
                title=resolved.priced.title,
                customization=resolved.cart_line.customization or {},
                buyer_id=buyer_id,
                seller_id=resolved.seller_id,
                unit_price=resolved.priced.unit_price,
                quantity=resolved.quantity,
                commission_rate=drafted.split.rate,
                platform_fee=drafted.split.fee,
                seller_earning=drafted.split.earning,
            )
        )
    return order, lines


@hekayaty.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command: PlaceOrder) -> list[str]:
        """Write the orders of one checkout.

        Raises:
            InvalidCartError: empty cart or an unrecognised line shape
            StaleReferenceError: a product, collection or seller vanished
            ValidationError: missing address, unresolved region, drifted quote,
                frozen seller or missing payment method
        """
        actor = Actor.of(command)
        cart_lines = _cart_lines(command.cart_lines)
        if not (command.payment_method or "").strip():
            raise ValidationError({"payment_method": ["Payment method is required"]})

        checkout_id = str(uuid4())
        manual = is_manual_method(command.payment_method)
        log = logger.bind(buyer_id=actor.user_id, checkout_id=checkout_id, payment_method=command.payment_method)

        resolved = [
            ResolvedLine(cart_line=line, priced=resolve_price(line.product_id, line.variant_id, line.collection_id))
            for line in cart_lines
        ]
        sellers = _load_sellers({line.seller_id for line in resolved})
        shipping_address = _shipping_address(command.shipping_address)
        quote = _authoritative_shipping(
            resolved, shipping_address, command.shipping_cost, command.shipping_breakdown
        )
        drafts = partition_cart(resolved, quote, {seller_id: s.commission_rate for seller_id, s in sellers.items()})

        order_repo = current_domain.repository_for(Order)
        line_repo = current_domain.repository_for(OrderLine)
        history = current_domain.repository_for(StatusHistory)

        orders = []
        for draft in drafts:
            order, lines = _build_order(draft, checkout_id, actor.user_id, command, shipping_address)
            for line in lines:
                line_repo.add(line)
                if line.is_physical:
                    history.append(str(line.id), line.fulfillment_status, ORDER_PLACED_NOTE, actor.user_id)

            order.record_placement(lines)
            if not manual:
                order.mark_paid()
                realize_order_earnings(order, lines)
            order_repo.add(order)
            orders.append(order)

        cleared = clear_cart(actor.user_id)

        log.info(
            "Checkout completed",
            orders=[str(o.id) for o in orders],
            totals=[o.total_amount for o in orders],
            status=orders[0].status,
            cart_lines_cleared=cleared,
        )
        return [str(o.id) for o in orders]
