"""Stock and sales counters.

Both counters move through single conditional UPDATE statements instead of
load-modify-save, so concurrent buyers cannot overwrite each other's counts.
Stock is taken off after the order commits, by the handler below; a
decrement that loses its race is reported and the order stands.
"""

import json
import warnings
from collections import Counter

import structlog
from protean import handle
from protean.utils.globals import current_domain
from protean.utils.query import Q

from catalogue.product.product import FulfillmentClass, Product
from ordering.order.events import OrderPlaced
from shared.domain import hekayaty
from shared.errors import StockRaceWarning

logger = structlog.get_logger(__name__)


def _column(name: str):
    dao = current_domain.repository_for(Product)._dao
    return dao, getattr(dao.database_model_cls, name)


def decrement_stock(product_id: str, quantity: int) -> bool:
    """Take ``quantity`` units off tracked stock if enough remain.

    Returns False when the decrement lost (not enough stock, or the product
    vanished). Untracked stock always succeeds and is left untouched.
    """
    dao, stock = _column("stock_quantity")
    updated = dao._update_all(Q(id=product_id, stock_quantity__gte=quantity), {"stock_quantity": stock - quantity})
    if updated == 1:
        return True

    product = current_domain.repository_for(Product)._dao.query.filter(id=product_id).all().first
    if product is not None and not product.tracks_stock:
        return True

    logger.debug(
        "Stock decrement refused",
        product_id=product_id,
        quantity=quantity,
        remaining=product.stock_quantity if product is not None else None,
    )
    return False


def record_sales(product_ids: Counter) -> None:
    """Add each product's count of sold lines to its ``sales_count``."""
    dao, sales = _column("sales_count")
    for product_id, lines in sorted(product_ids.items()):
        dao._update_all(Q(id=product_id), {"sales_count": sales + lines})


@hekayaty.event_handler(part_of=Product, stream_category="hekayaty::order")
class StockReservationHandler:
    @handle(OrderPlaced)
    def reserve_stock(self, event: OrderPlaced) -> None:
        """Take stock for the physical lines of a placed order. Never raises."""
        for item in json.loads(event.items or "[]"):
            if item["fulfillment_class"] != FulfillmentClass.PHYSICAL.value or not item.get("product_id"):
                continue
            if decrement_stock(item["product_id"], item["quantity"]):
                continue

            message = (
                f"Stock for product {item['product_id']} could not cover "
                f"{item['quantity']} unit(s) of order {event.order_id}"
            )
            warnings.warn(message, StockRaceWarning, stacklevel=2)
            logger.warning(
                "Stock decrement failed",
                order_id=event.order_id,
                order_line_id=item["order_line_id"],
                product_id=item["product_id"],
                quantity=item["quantity"],
            )
