"""ShippingRate: one row of a seller's regional rate table.

The region is a destination name ("Cairo") or a sentinel (``default``,
``all``, ``nationwide``) that covers any destination the seller does not
list explicitly.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from shared.domain import hekayaty


def normalize_region(region: str | None) -> str:
    return (region or "").strip().lower()


@hekayaty.aggregate
class ShippingRate:
    seller_id = Identifier(required=True)
    region_name = String(required=True, max_length=100)
    amount = Integer(required=True)
    delivery_time_min = Integer()
    delivery_time_max = Integer()
    created_at = DateTime(default=lambda: datetime.now(UTC))

    @classmethod
    def define(
        cls,
        seller_id: str,
        region_name: str | None,
        amount: int,
        delivery_time_min: int | None = None,
        delivery_time_max: int | None = None,
    ) -> "ShippingRate":
        errors: dict[str, list[str]] = {}
        if not region_name or not region_name.strip():
            errors["region_name"] = ["Region name is required"]
        if amount < 0:
            errors["amount"] = ["Shipping amount cannot be negative"]
        if delivery_time_min is not None and delivery_time_min < 0:
            errors["delivery_time_min"] = ["Delivery time cannot be negative"]
        if delivery_time_min is not None and delivery_time_max is not None and delivery_time_min > delivery_time_max:
            errors["delivery_time_max"] = ["Maximum delivery time must not be less than the minimum"]
        if errors:
            raise ValidationError(errors)

        return cls(
            seller_id=seller_id,
            region_name=region_name.strip(),
            amount=amount,
            delivery_time_min=delivery_time_min,
            delivery_time_max=delivery_time_max,
        )

    @property
    def normalized_region(self) -> str:
        return normalize_region(self.region_name)
