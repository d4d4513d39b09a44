"""Earning: a seller's realized share of one paid order.

Exactly one record exists per (order, seller). ``amount`` is what the seller
is owed: the line earnings after commission plus any shipping charged on
their behalf. ``gross_amount``, ``platform_fee`` and ``shipping_amount`` are
kept for reporting.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer, String

from shared.domain import hekayaty


class EarningStatus(Enum):
    PENDING = "pending"
    PAID_OUT = "paid_out"


@hekayaty.aggregate
class Earning:
    seller_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Integer(required=True)
    gross_amount = Integer(default=0)
    platform_fee = Integer(default=0)
    shipping_amount = Integer(default=0)
    units = Integer(default=0)
    status = String(max_length=20, choices=EarningStatus, default=EarningStatus.PENDING.value)
    created_at = DateTime(default=lambda: datetime.now(UTC))
    paid_out_at = DateTime()

    def mark_paid_out(self) -> None:
        self.status = EarningStatus.PAID_OUT.value
        self.paid_out_at = datetime.now(UTC)


@hekayaty.repository(part_of=Earning)
class EarningRepository:
    def for_order(self, order_id: str) -> list[Earning]:
        return self._dao.query.filter(order_id=order_id).order_by("seller_id").limit(None).all().items

    def for_seller(self, seller_id: str, newest_first: bool = False) -> list[Earning]:
        order = ["-created_at", "-id"] if newest_first else ["created_at", "id"]
        return self._dao.query.filter(seller_id=seller_id).order_by(order).limit(None).all().items
