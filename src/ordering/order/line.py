"""OrderLine aggregate.

A line is frozen at order time: unit price, owning seller and fulfillment
class never change afterwards, even if the product does. Each line is its
own aggregate with its own version, so a seller advancing one line never
contends with another seller working on a sibling line, and two writers
racing on the same line cannot both win.

State Machine (physical lines only):
    PENDING → ACCEPTED → PREPARING → SHIPPED → DELIVERED
    ACCEPTED → SHIPPED
    {PENDING, ACCEPTED} → REJECTED
    {PENDING, ACCEPTED, PREPARING} → CANCELLED

Digital lines are created DELIVERED and have no lifecycle.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Dict, Identifier, Integer, String, Text

from catalogue.product.product import FulfillmentClass
from ordering.order.events import (
    LineAccepted,
    LineCancelled,
    LineDelivered,
    LinePreparing,
    LineRejected,
    LineShipped,
)
from shared.domain import hekayaty
from shared.errors import IllegalTransitionError

MIN_ESTIMATED_DELIVERY_DAYS = 1
MAX_ESTIMATED_DELIVERY_DAYS = 90
MIN_TRACKING_NUMBER_LENGTH = 3
MIN_REJECTION_REASON_LENGTH = 5


class FulfillmentStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    FulfillmentStatus.PENDING: {
        FulfillmentStatus.ACCEPTED,
        FulfillmentStatus.REJECTED,
        FulfillmentStatus.CANCELLED,
    },
    FulfillmentStatus.ACCEPTED: {
        FulfillmentStatus.PREPARING,
        FulfillmentStatus.SHIPPED,
        FulfillmentStatus.REJECTED,
        FulfillmentStatus.CANCELLED,
    },
    FulfillmentStatus.PREPARING: {FulfillmentStatus.SHIPPED, FulfillmentStatus.CANCELLED},
    FulfillmentStatus.SHIPPED: {FulfillmentStatus.DELIVERED},
    FulfillmentStatus.DELIVERED: set(),  # terminal
    FulfillmentStatus.REJECTED: set(),  # terminal
    FulfillmentStatus.CANCELLED: set(),  # terminal
}

TERMINAL_FULFILLMENT_STATUSES = frozenset(s for s, targets in _VALID_TRANSITIONS.items() if not targets)


@hekayaty.aggregate
class OrderLine:
    order_id = Identifier(required=True)
    position = Integer(default=0)

    product_id = Identifier()
    variant_id = Identifier()
    collection_id = Identifier()
    title = String(max_length=255, default="")
    customization = Dict()

    # Denormalized at order time
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    fulfillment_class = String(max_length=20, choices=FulfillmentClass, required=True)
    unit_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    commission_rate = Integer(required=True)
    platform_fee = Integer(required=True)
    seller_earning = Integer(required=True)

    fulfillment_status = String(
        max_length=20,
        choices=FulfillmentStatus,
        default=FulfillmentStatus.PENDING.value,
    )
    estimated_delivery_days = Integer()
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)
    rejection_reason = Text()
    cancellation_reason = Text()

    created_at = DateTime()
    accepted_at = DateTime()
    preparing_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    rejected_at = DateTime()
    cancelled_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, fulfillment_class: FulfillmentClass, **fields):
        """A new line; physical lines await the seller, digital ones are delivered at once."""
        now = datetime.now(UTC)
        physical = fulfillment_class is FulfillmentClass.PHYSICAL
        return cls(
            fulfillment_class=fulfillment_class.value,
            fulfillment_status=(FulfillmentStatus.PENDING if physical else FulfillmentStatus.DELIVERED).value,
            created_at=now,
            delivered_at=None if physical else now,
            **fields,
        )

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    @property
    def is_physical(self) -> bool:
        return self.fulfillment_class == FulfillmentClass.PHYSICAL.value

    def _identity(self) -> dict:
        return {
            "order_line_id": str(self.id),
            "order_id": str(self.order_id),
            "buyer_id": str(self.buyer_id),
            "seller_id": str(self.seller_id),
            "title": self.title,
        }

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: FulfillmentStatus) -> None:
        current = FulfillmentStatus(self.fulfillment_status)
        if not self.is_physical or target not in _VALID_TRANSITIONS.get(current, set()):
            raise IllegalTransitionError(current.value, target.value, field="fulfillment_status")

    def accept(self, estimated_delivery_days: int) -> None:
        if (
            estimated_delivery_days is None
            or not MIN_ESTIMATED_DELIVERY_DAYS <= estimated_delivery_days <= MAX_ESTIMATED_DELIVERY_DAYS
        ):
            raise ValidationError(
                {
                    "estimated_delivery_days": [
                        f"Estimated delivery must be between {MIN_ESTIMATED_DELIVERY_DAYS} "
                        f"and {MAX_ESTIMATED_DELIVERY_DAYS} days"
                    ]
                }
            )
        self._assert_can_transition(FulfillmentStatus.ACCEPTED)
        now = datetime.now(UTC)
        self.fulfillment_status = FulfillmentStatus.ACCEPTED.value
        self.estimated_delivery_days = estimated_delivery_days
        self.accepted_at = now
        self.raise_(LineAccepted(**self._identity(), estimated_delivery_days=estimated_delivery_days, accepted_at=now))

    def start_preparing(self) -> None:
        self._assert_can_transition(FulfillmentStatus.PREPARING)
        now = datetime.now(UTC)
        self.fulfillment_status = FulfillmentStatus.PREPARING.value
        self.preparing_at = now
        self.raise_(LinePreparing(**self._identity(), preparing_at=now))

    def ship(self, tracking_number: str, carrier: str | None = None) -> None:
        tracking_number = (tracking_number or "").strip()
        if len(tracking_number) < MIN_TRACKING_NUMBER_LENGTH:
            raise ValidationError(
                {"tracking_number": [f"Tracking number must be at least {MIN_TRACKING_NUMBER_LENGTH} characters"]}
            )
        self._assert_can_transition(FulfillmentStatus.SHIPPED)
        now = datetime.now(UTC)
        self.fulfillment_status = FulfillmentStatus.SHIPPED.value
        self.tracking_number = tracking_number
        self.carrier = (carrier or "").strip() or None
        self.shipped_at = now
        self.raise_(
            LineShipped(**self._identity(), tracking_number=tracking_number, carrier=self.carrier, shipped_at=now)
        )

    def deliver(self) -> None:
        self._assert_can_transition(FulfillmentStatus.DELIVERED)
        now = datetime.now(UTC)
        self.fulfillment_status = FulfillmentStatus.DELIVERED.value
        self.delivered_at = now
        self.raise_(LineDelivered(**self._identity(), delivered_at=now))

    def reject(self, reason: str) -> None:
        reason = (reason or "").strip()
        if len(reason) < MIN_REJECTION_REASON_LENGTH:
            raise ValidationError(
                {"reason": [f"Rejection reason must be at least {MIN_REJECTION_REASON_LENGTH} characters"]}
            )
        self._assert_can_transition(FulfillmentStatus.REJECTED)
        now = datetime.now(UTC)
        self.fulfillment_status = FulfillmentStatus.REJECTED.value
        self.rejection_reason = reason
        self.rejected_at = now
        self.raise_(LineRejected(**self._identity(), reason=reason, rejected_at=now))

    def cancel(self, reason: str | None = None) -> None:
        self._assert_can_transition(FulfillmentStatus.CANCELLED)
        now = datetime.now(UTC)
        self.fulfillment_status = FulfillmentStatus.CANCELLED.value
        self.cancellation_reason = (reason or "").strip() or None
        self.cancelled_at = now
        self.raise_(LineCancelled(**self._identity(), reason=self.cancellation_reason, cancelled_at=now))
