"""Cart Partitioner.

Splits a priced cart by fulfillment class. Physical and digital lines never
share an order: physical orders carry shipping and a multi-day lifecycle,
digital orders complete at once. Each sub-order gets its own totals and its
own per-line commission split; only the physical one carries shipping, and
only for the sellers who own its lines.
"""

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from catalogue.pricing import PricedReference
from catalogue.product.product import FulfillmentClass
from ordering.cart.cart import CartLine
from ordering.commission import CommissionSplit, calculate_commission
from shipping.allocation import ShippingAllocation, ShippingQuote


@dataclass(frozen=True)
class ResolvedLine:
    """A cart line with its authoritative price, seller and class."""

    cart_line: CartLine
    priced: PricedReference

    @property
    def seller_id(self) -> str:
        return self.priced.seller_id

    @property
    def fulfillment_class(self) -> FulfillmentClass:
        return self.priced.fulfillment_class

    @property
    def quantity(self) -> int:
        return self.cart_line.quantity

    @property
    def line_total(self) -> int:
        return self.priced.unit_price * self.cart_line.quantity


@dataclass(frozen=True)
class DraftLine:
    line: ResolvedLine
    split: CommissionSplit


@dataclass
class SubOrderDraft:
    fulfillment_class: FulfillmentClass
    lines: list[DraftLine] = field(default_factory=list)
    shipping: dict[str, ShippingAllocation] = field(default_factory=dict)

    @property
    def subtotal(self) -> int:
        return sum(d.line.line_total for d in self.lines)

    @property
    def shipping_cost(self) -> int:
        return sum(a.amount for a in self.shipping.values())

    @property
    def total(self) -> int:
        return self.subtotal + self.shipping_cost

    @property
    def platform_fee(self) -> int:
        return sum(d.split.fee for d in self.lines)

    @property
    def seller_earnings(self) -> int:
        # Shipping is passed through to the sellers in full
        return sum(d.split.earning for d in self.lines) + self.shipping_cost

    @property
    def seller_ids(self) -> list[str]:
        return sorted({d.line.seller_id for d in self.lines})


def partition_cart(
    lines: Sequence[ResolvedLine],
    shipping: ShippingQuote | None,
    seller_rates: Mapping[str, int | None],
) -> list[SubOrderDraft]:
    """Return the physical sub-order (if any) followed by the digital one (if any)."""
    physical = SubOrderDraft(FulfillmentClass.PHYSICAL)
    digital = SubOrderDraft(FulfillmentClass.DIGITAL)

    for line in lines:
        split = calculate_commission(line.line_total, line.fulfillment_class, seller_rates.get(line.seller_id))
        target = physical if line.fulfillment_class is FulfillmentClass.PHYSICAL else digital
        target.lines.append(DraftLine(line=line, split=split))

    if physical.lines and shipping is not None:
        physical.shipping = {
            seller_id: shipping.allocations[seller_id]
            for seller_id in physical.seller_ids
            if seller_id in shipping.allocations
        }

    return [draft for draft in (physical, digital) if draft.lines]


def physical_item_counts(lines: Sequence[ResolvedLine]) -> Counter:
    """Number of physical lines per seller."""
    return Counter(line.seller_id for line in lines if line.fulfillment_class is FulfillmentClass.PHYSICAL)
