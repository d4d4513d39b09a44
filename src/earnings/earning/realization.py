"""Earnings realization for a paid order.

Runs inside the unit of work that moves an order to PAID: the admin payment
gate for manual methods, checkout itself for auto-paid ones. Each seller of
the order gets one Earning aggregating all of their lines, priced at the
seller's current commission rate (physical lines stay pinned to the platform
rate), plus the shipping charged on their behalf. Every product line counts
as one sale of its product, whatever the quantity.
"""

from collections import Counter, defaultdict
from collections.abc import Sequence

import structlog
from protean.utils.globals import current_domain

from catalogue.product.product import FulfillmentClass
from catalogue.product.stock import record_sales
from catalogue.seller.seller import Seller
from earnings.earning.earning import Earning
from ordering.commission import calculate_commission

logger = structlog.get_logger(__name__)


def _current_rates(seller_ids: list[str]) -> dict[str, int | None]:
    repo = current_domain.repository_for(Seller)
    sellers = repo._dao.query.filter(id__in=seller_ids).limit(None).all().items
    return {str(s.id): s.commission_rate for s in sellers}


def realize_order_earnings(order, lines: Sequence) -> list[Earning]:
    """Write one Earning per seller of ``order`` and count the sales of its lines."""
    repo = current_domain.repository_for(Earning)
    if repo.for_order(str(order.id)):
        # Guarded by the settlement transition; reaching here means a bug upstream
        raise RuntimeError(f"Earnings for order {order.id} were already realized")

    rates = _current_rates(sorted({str(line.seller_id) for line in lines}))
    totals: dict[str, dict[str, int]] = defaultdict(
        lambda: {"gross": 0, "fee": 0, "earning": 0, "units": 0, "shipping": 0}
    )

    for line in lines:
        seller_id = str(line.seller_id)
        split = calculate_commission(line.line_total, FulfillmentClass(line.fulfillment_class), rates.get(seller_id))
        seller_totals = totals[seller_id]
        seller_totals["gross"] += line.line_total
        seller_totals["fee"] += split.fee
        seller_totals["earning"] += split.earning
        seller_totals["units"] += line.quantity

    for charge in order.shipping_charges or []:
        totals[str(charge.seller_id)]["shipping"] += charge.amount

    earnings = []
    for seller_id in sorted(totals):
        seller_totals = totals[seller_id]
        earning = Earning(
            seller_id=seller_id,
            order_id=str(order.id),
            amount=seller_totals["earning"] + seller_totals["shipping"],
            gross_amount=seller_totals["gross"],
            platform_fee=seller_totals["fee"],
            shipping_amount=seller_totals["shipping"],
            units=seller_totals["units"],
        )
        repo.add(earning)
        earnings.append(earning)

    record_sales(Counter(str(line.product_id) for line in lines if line.product_id))

    logger.info(
        "Order earnings realized",
        order_id=str(order.id),
        sellers=len(earnings),
        total=sum(e.amount for e in earnings),
    )
    return earnings
