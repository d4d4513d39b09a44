"""Product and ProductVariant.

Prices are integer minor-currency units. ``stock_quantity`` is ``None`` for
products whose stock is not tracked (most digital goods).
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from shared.domain import hekayaty


class FulfillmentClass(Enum):
    PHYSICAL = "physical"
    DIGITAL = "digital"


# Product types that always ship, whatever the requires_shipping flag says
PHYSICAL_PRODUCT_TYPES = frozenset({"physical", "merchandise"})


def classify(product_type: str | None, requires_shipping: bool | None) -> FulfillmentClass:
    if requires_shipping or (product_type or "").lower() in PHYSICAL_PRODUCT_TYPES:
        return FulfillmentClass.PHYSICAL
    return FulfillmentClass.DIGITAL


@hekayaty.aggregate
class Product:
    seller_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    type = String(max_length=50, default="ebook")
    requires_shipping = Boolean(default=False)
    price = Integer(min_value=0, default=0)
    stock_quantity = Integer()
    sales_count = Integer(default=0)
    created_at = DateTime(default=lambda: datetime.now(UTC))
    deleted_at = DateTime()

    @property
    def fulfillment_class(self) -> FulfillmentClass:
        return classify(self.type, self.requires_shipping)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def tracks_stock(self) -> bool:
        return self.stock_quantity is not None

    def soft_delete(self) -> None:
        self.deleted_at = datetime.now(UTC)


@hekayaty.aggregate
class ProductVariant:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    price = Integer(min_value=0, required=True)
