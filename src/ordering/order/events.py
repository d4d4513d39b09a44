"""Ordering domain events: immutable facts about settlement and line fulfillment.

All events are past tense and versioned. Order events land on the
``hekayaty::order`` stream, line events on ``hekayaty::order_line``.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from shared.domain import hekayaty


# ---------------------------------------------------------------------------
# Settlement
# ---------------------------------------------------------------------------
@hekayaty.event(part_of="Order")
class OrderPlaced:
    """An order was written by checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    fulfillment_class = String(required=True)
    payment_method = String(required=True)
    total_amount = Integer(required=True)
    shipping_cost = Integer(default=0)
    items = Text(required=True)  # JSON list of line dicts
    placed_at = DateTime(required=True)


@hekayaty.event(part_of="Order")
class PaymentVerified:
    """The order was marked paid, by an admin or at once for a non-manual method."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    total_amount = Integer(required=True)
    verified_by = Identifier()
    paid_at = DateTime(required=True)


@hekayaty.event(part_of="Order")
class PaymentRejected:
    """An admin declined a manual payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    note = Text()
    rejected_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Line fulfillment
# ---------------------------------------------------------------------------
@hekayaty.event(part_of="OrderLine")
class LineAccepted:
    __version__ = 1

    order_line_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String()
    estimated_delivery_days = Integer(required=True)
    accepted_at = DateTime(required=True)


@hekayaty.event(part_of="OrderLine")
class LinePreparing:
    __version__ = 1

    order_line_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String()
    preparing_at = DateTime(required=True)


@hekayaty.event(part_of="OrderLine")
class LineShipped:
    __version__ = 1

    order_line_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String()
    tracking_number = String(required=True)
    carrier = String()
    shipped_at = DateTime(required=True)


@hekayaty.event(part_of="OrderLine")
class LineDelivered:
    __version__ = 1

    order_line_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String()
    delivered_at = DateTime(required=True)


@hekayaty.event(part_of="OrderLine")
class LineRejected:
    __version__ = 1

    order_line_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String()
    reason = Text(required=True)
    rejected_at = DateTime(required=True)


@hekayaty.event(part_of="OrderLine")
class LineCancelled:
    __version__ = 1

    order_line_id = Identifier(required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String()
    reason = Text()
    cancelled_at = DateTime(required=True)
