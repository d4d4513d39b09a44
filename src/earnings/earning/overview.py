"""Earnings overview for a seller's dashboard."""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from earnings.earning.earning import Earning
from earnings.payout.payout import Payout, PayoutStatus
from shared.actor import Actor
from shared.errors import AuthorizationError

RECENT_EARNINGS_LIMIT = 10


@dataclass
class EarningsOverview:
    seller_id: str
    total_earnings: int
    total_gross: int
    units_sold: int
    platform_commission: int
    shipping_earned: int
    paid_out: int
    pending_payouts: int
    available_balance: int
    recent_earnings: list[Earning] = field(default_factory=list)
    payout_history: list[Payout] = field(default_factory=list)


def earnings_overview(actor: Actor, seller_id: str | None = None) -> EarningsOverview:
    """Totals, balance and history for ``seller_id`` (default: the actor)."""
    seller_id = seller_id or actor.user_id
    if not actor.can_act_for(seller_id):
        raise AuthorizationError({"actor": ["Sellers can only view their own earnings"]})

    earnings = current_domain.repository_for(Earning).for_seller(seller_id, newest_first=True)
    payouts = (
        current_domain.repository_for(Payout)
        ._dao.query.filter(seller_id=seller_id)
        .order_by(["-requested_at", "id"])
        .limit(None)
        .all()
        .items
    )

    total = sum(e.amount for e in earnings)
    paid_out = sum(p.amount for p in payouts if p.status == PayoutStatus.PROCESSED.value)
    pending = sum(p.amount for p in payouts if p.status == PayoutStatus.PENDING.value)

    return EarningsOverview(
        seller_id=seller_id,
        total_earnings=total,
        total_gross=sum(e.gross_amount or 0 for e in earnings),
        units_sold=sum(e.units or 0 for e in earnings),
        platform_commission=sum(e.platform_fee or 0 for e in earnings),
        shipping_earned=sum(e.shipping_amount or 0 for e in earnings),
        paid_out=paid_out,
        pending_payouts=pending,
        available_balance=total - paid_out - pending,
        recent_earnings=earnings[:RECENT_EARNINGS_LIMIT],
        payout_history=payouts,
    )
