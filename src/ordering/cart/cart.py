"""Stored cart lines.

A cart line references a product, a product plus variant, or a collection.
It never carries a price; checkout resolves prices itself.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from protean.fields import DateTime, Dict, Identifier, Integer

from shared.domain import hekayaty
from shared.errors import InvalidCartError


@dataclass(frozen=True)
class CartLine:
    """A cart line as submitted at checkout."""

    quantity: int = 1
    product_id: str | None = None
    variant_id: str | None = None
    collection_id: str | None = None
    customization: dict | None = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            quantity=data.get("quantity", 1),
            product_id=data.get("product_id") or None,
            variant_id=data.get("variant_id") or None,
            collection_id=data.get("collection_id") or None,
            customization=data.get("customization"),
        )

    def validate(self) -> None:
        errors: dict[str, list[str]] = {}
        if bool(self.product_id) == bool(self.collection_id):
            errors["reference"] = ["A cart line must reference exactly one product or collection"]
        if self.variant_id and not self.product_id:
            errors["variant_id"] = ["A variant can only be chosen for a product"]
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool) or self.quantity < 1:
            errors["quantity"] = ["Quantity must be at least 1"]
        if errors:
            raise InvalidCartError(errors)


@hekayaty.aggregate
class CartItem:
    buyer_id = Identifier(required=True)
    product_id = Identifier()
    variant_id = Identifier()
    collection_id = Identifier()
    quantity = Integer(min_value=1, default=1)
    customization = Dict()
    created_at = DateTime(default=lambda: datetime.now(UTC))

    def to_line(self) -> CartLine:
        return CartLine(
            quantity=self.quantity,
            product_id=str(self.product_id) if self.product_id else None,
            variant_id=str(self.variant_id) if self.variant_id else None,
            collection_id=str(self.collection_id) if self.collection_id else None,
            customization=self.customization or None,
        )
