"""Shipping Allocator.

Resolves one shipping charge per seller for a destination region from the
seller's own rate table: exact region match first (case-insensitive, trimmed),
then a sentinel region, otherwise zero with the region flagged unresolved.

The same function serves the cart-time quote and the authoritative charge at
checkout; it depends only on the region and the rate rows, which are read in a
fixed order, so both calls agree.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

import structlog
from protean.utils.globals import current_domain

from shared.domain import hekayaty
from shipping.rate.rate import ShippingRate, normalize_region

logger = structlog.get_logger(__name__)

UNRESOLVED_REGION_LABEL = "Not Available"


@dataclass(frozen=True)
class ShippingAllocation:
    seller_id: str
    amount: int
    region_label: str
    delivery_min_days: int | None
    delivery_max_days: int | None
    item_count: int
    unresolved: bool = False


@dataclass(frozen=True)
class ShippingQuote:
    region: str
    allocations: dict[str, ShippingAllocation] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(a.amount for a in self.allocations.values())

    @property
    def unresolved_sellers(self) -> list[str]:
        return [seller_id for seller_id, a in self.allocations.items() if a.unresolved]

    def amount_for(self, seller_id: str) -> int:
        allocation = self.allocations.get(seller_id)
        return allocation.amount if allocation else 0


def match_rate(
    region: str,
    rates: Sequence[ShippingRate],
    sentinel_regions: Iterable[str],
) -> ShippingRate | None:
    """Pick the rate that applies to ``region``, or None."""
    destination = normalize_region(region)
    sentinels = {normalize_region(s) for s in sentinel_regions}

    if destination:
        for rate in rates:
            if rate.normalized_region == destination:
                return rate
    for rate in rates:
        if rate.normalized_region in sentinels:
            return rate
    return None


def allocate_shipping(
    region: str,
    item_counts: Mapping[str, int],
    rates_by_seller: Mapping[str, Sequence[ShippingRate]],
    sentinel_regions: Iterable[str] | None = None,
) -> ShippingQuote:
    """Allocate shipping per seller. Pure; the caller supplies the rate rows."""
    if sentinel_regions is None:
        sentinel_regions = hekayaty.sentinel_regions
    sentinel_regions = list(sentinel_regions)

    allocations: dict[str, ShippingAllocation] = {}
    for seller_id in sorted(item_counts):
        rate = match_rate(region, rates_by_seller.get(seller_id, ()), sentinel_regions)
        if rate is None:
            allocations[seller_id] = ShippingAllocation(
                seller_id=seller_id,
                amount=0,
                region_label=UNRESOLVED_REGION_LABEL,
                delivery_min_days=None,
                delivery_max_days=None,
                item_count=item_counts[seller_id],
                unresolved=True,
            )
            continue

        allocations[seller_id] = ShippingAllocation(
            seller_id=seller_id,
            amount=rate.amount,
            region_label=rate.region_name,
            delivery_min_days=rate.delivery_time_min,
            delivery_max_days=rate.delivery_time_max,
            item_count=item_counts[seller_id],
        )

    return ShippingQuote(region=region, allocations=allocations)


def load_rates(seller_ids: Iterable[str]) -> dict[str, list[ShippingRate]]:
    seller_ids = list(seller_ids)
    rates_by_seller: dict[str, list[ShippingRate]] = {seller_id: [] for seller_id in seller_ids}
    if not seller_ids:
        return rates_by_seller

    repo = current_domain.repository_for(ShippingRate)
    query = repo._dao.query.filter(seller_id__in=seller_ids).order_by(["seller_id", "created_at", "id"])
    rates = query.limit(None).all().items
    for rate in rates:
        rates_by_seller[str(rate.seller_id)].append(rate)
    return rates_by_seller


def quote_shipping(region: str, item_counts: Mapping[str, int]) -> ShippingQuote:
    """Quote shipping for ``region`` given each physical seller's line count."""
    quote = allocate_shipping(region, item_counts, load_rates(item_counts))
    if quote.unresolved_sellers:
        logger.info(
            "Shipping region unresolved",
            region=region,
            seller_ids=quote.unresolved_sellers,
        )
    return quote
