"""Cart-time shipping quote.

Uses the same resolution and allocation as checkout, so a quote shown to the
buyer matches what checkout charges as long as the rate tables do not change
in between.
"""

from collections.abc import Sequence

from catalogue.pricing import resolve_price
from ordering.cart.cart import CartLine
from ordering.checkout.partition import ResolvedLine, physical_item_counts
from shipping.allocation import ShippingQuote, quote_shipping


def quote_cart_shipping(region: str, cart_lines: Sequence[CartLine]) -> ShippingQuote:
    for line in cart_lines:
        line.validate()
    resolved = [
        ResolvedLine(cart_line=line, priced=resolve_price(line.product_id, line.variant_id, line.collection_id))
        for line in cart_lines
    ]
    return quote_shipping(region, physical_item_counts(resolved))
