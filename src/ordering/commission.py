"""Commission Calculator.

Physical lines pay the fixed platform rate whatever the seller's configured
rate is; digital lines pay the seller's own rate, or the default when unset.
The fee is rounded half-up and the earning takes the remainder, so
``fee + earning == amount`` always holds.
"""

from dataclasses import dataclass

from catalogue.product.product import FulfillmentClass
from shared.domain import hekayaty


@dataclass(frozen=True)
class CommissionSplit:
    rate: int
    fee: int
    earning: int

    @property
    def amount(self) -> int:
        return self.fee + self.earning


def commission_rate(fulfillment_class: FulfillmentClass, seller_rate: int | None) -> int:
    """Platform fee rate, in percent, for a line of the given class."""
    if fulfillment_class is FulfillmentClass.PHYSICAL:
        return int(hekayaty.physical_rate)
    if seller_rate is None:
        return int(hekayaty.default_digital_rate)
    return seller_rate


def split_amount(amount: int, rate: int) -> CommissionSplit:
    if amount < 0:
        raise ValueError(f"Cannot split a negative amount: {amount}")
    # Integer half-up rounding of amount * rate / 100
    fee = (amount * rate + 50) // 100
    return CommissionSplit(rate=rate, fee=fee, earning=amount - fee)


def calculate_commission(
    amount: int,
    fulfillment_class: FulfillmentClass,
    seller_rate: int | None = None,
) -> CommissionSplit:
    return split_amount(amount, commission_rate(fulfillment_class, seller_rate))
