"""Order aggregate: one settlement unit.

An Order is a buyer, a payment method and a settlement status. Its lines
live in their own ``OrderLine`` aggregates so sellers can move them through
fulfillment independently; they are frozen at order time and reference the
order by id.

State Machine:
    PENDING → PAID        (admin verification, or at once for non-manual methods)
    PENDING → REJECTED    (admin declines a manual payment)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from catalogue.product.product import FulfillmentClass
from ordering.order.events import OrderPlaced, PaymentRejected, PaymentVerified
from shared.domain import hekayaty
from shared.errors import IllegalTransitionError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class SettlementStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    REJECTED = "rejected"


_VALID_SETTLEMENT_TRANSITIONS = {
    SettlementStatus.PENDING: {SettlementStatus.PAID, SettlementStatus.REJECTED},
    SettlementStatus.PAID: set(),  # terminal
    SettlementStatus.REJECTED: set(),  # terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@hekayaty.value_object(part_of="Order")
class ShippingAddress:
    """Where a physical order ships to; ``city`` is the shipping region."""

    full_name = String(max_length=200)
    phone_number = String(max_length=50)
    city = String(max_length=100)
    address_line = String(max_length=500)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@hekayaty.entity(part_of="Order")
class ShippingCharge:
    """The shipping amount charged on behalf of one seller of a physical order."""

    seller_id = Identifier(required=True)
    amount = Integer(required=True, min_value=0)
    region_label = String(max_length=100)
    delivery_min_days = Integer()
    delivery_max_days = Integer()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@hekayaty.aggregate
class Order:
    # Shared by the sub-orders of one mixed cart
    checkout_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    fulfillment_class = String(max_length=20, choices=FulfillmentClass, required=True)

    total_amount = Integer(required=True)
    platform_fee = Integer(required=True)
    seller_earnings = Integer(required=True)
    shipping_cost = Integer(default=0)
    shipping_address = ValueObject(ShippingAddress)
    shipping_charges = HasMany(ShippingCharge)

    payment_method = String(required=True, max_length=50)
    payment_proof_url = String(max_length=1000)
    payment_reference = String(max_length=255)
    status = String(max_length=20, choices=SettlementStatus, default=SettlementStatus.PENDING.value)
    is_verified = Boolean(default=False)
    verified_by = Identifier()
    rejection_note = Text()

    created_at = DateTime()
    paid_at = DateTime()
    rejected_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        checkout_id: str,
        buyer_id: str,
        fulfillment_class: FulfillmentClass,
        total_amount: int,
        platform_fee: int,
        seller_earnings: int,
        shipping_cost: int,
        payment_method: str,
        payment_proof_url: str | None = None,
        payment_reference: str | None = None,
        shipping_address: ShippingAddress | None = None,
    ):
        """A new order awaiting settlement."""
        return cls(
            checkout_id=checkout_id,
            buyer_id=buyer_id,
            fulfillment_class=fulfillment_class.value,
            total_amount=total_amount,
            platform_fee=platform_fee,
            seller_earnings=seller_earnings,
            shipping_cost=shipping_cost,
            shipping_address=shipping_address,
            payment_method=payment_method,
            payment_proof_url=payment_proof_url,
            payment_reference=payment_reference,
            status=SettlementStatus.PENDING.value,
            created_at=datetime.now(UTC),
        )

    @property
    def is_physical(self) -> bool:
        return self.fulfillment_class == FulfillmentClass.PHYSICAL.value

    def charge_for(self, seller_id: str) -> int:
        return sum(c.amount for c in self.shipping_charges or [] if str(c.seller_id) == str(seller_id))

    def record_placement(self, lines) -> None:
        """Announce the order together with the lines written for it."""
        items = [
            {
                "order_line_id": str(line.id),
                "product_id": str(line.product_id) if line.product_id else None,
                "collection_id": str(line.collection_id) if line.collection_id else None,
                "seller_id": str(line.seller_id),
                "fulfillment_class": line.fulfillment_class,
                "quantity": line.quantity,
            }
            for line in lines
        ]
        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                checkout_id=str(self.checkout_id),
                buyer_id=str(self.buyer_id),
                fulfillment_class=self.fulfillment_class,
                payment_method=self.payment_method,
                total_amount=self.total_amount,
                shipping_cost=self.shipping_cost or 0,
                items=json.dumps(items),
                placed_at=self.created_at,
            )
        )

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: SettlementStatus) -> None:
        current = SettlementStatus(self.status)
        if target not in _VALID_SETTLEMENT_TRANSITIONS.get(current, set()):
            raise IllegalTransitionError(current.value, target.value)

    def mark_paid(self, verified_by: str | None = None) -> None:
        self._assert_can_transition(SettlementStatus.PAID)
        now = datetime.now(UTC)
        self.status = SettlementStatus.PAID.value
        self.is_verified = True
        self.verified_by = verified_by
        self.paid_at = now
        self.raise_(
            PaymentVerified(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                total_amount=self.total_amount,
                verified_by=verified_by,
                paid_at=now,
            )
        )

    def reject_payment(self, note: str | None = None) -> None:
        self._assert_can_transition(SettlementStatus.REJECTED)
        now = datetime.now(UTC)
        self.status = SettlementStatus.REJECTED.value
        self.rejection_note = note
        self.rejected_at = now
        self.raise_(
            PaymentRejected(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                note=note,
                rejected_at=now,
            )
        )
