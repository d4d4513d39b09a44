"""FastAPI routes for the Earnings domain: overview and payouts."""

from dataclasses import fields

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from earnings.api.schemas import (
    EarningsOverviewResponse,
    PayoutListResponse,
    PayoutResponse,
    RequestPayoutRequest,
    ReviewPayoutRequest,
)
from earnings.earning.overview import earnings_overview
from earnings.payout.ledger import RequestPayout, ReviewPayout, list_payouts
from earnings.payout.payout import Payout
from shared.actor import Actor
from shared.http import get_actor

# ---------------------------------------------------------------------------
# Seller Routers
# ---------------------------------------------------------------------------
earnings_router = APIRouter(prefix="/earnings", tags=["earnings"])
payout_router = APIRouter(prefix="/payouts", tags=["payouts"])


@earnings_router.get("/overview", response_model=EarningsOverviewResponse)
async def overview(seller_id: str | None = None, actor: Actor = Depends(get_actor)) -> EarningsOverviewResponse:
    result = earnings_overview(actor, seller_id)
    return EarningsOverviewResponse.model_validate(
        {
            **{f.name: getattr(result, f.name) for f in fields(result)},
            "recent_earnings": [e.to_dict() for e in result.recent_earnings],
            "payout_history": [p.to_dict() for p in result.payout_history],
        }
    )


@payout_router.post("", status_code=201, response_model=PayoutResponse)
async def create_payout(body: RequestPayoutRequest, actor: Actor = Depends(get_actor)) -> PayoutResponse:
    """Request a payout against the available balance."""
    command = RequestPayout(
        amount=body.amount,
        method=body.method,
        method_details=body.method_details or {},
        **actor.as_fields(),
    )
    payout_id = current_domain.process(command, asynchronous=False)
    return PayoutResponse.model_validate(current_domain.repository_for(Payout).get(payout_id).to_dict())


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
payout_admin_router = APIRouter(prefix="/admin/payouts", tags=["admin"])


@payout_admin_router.get("", response_model=PayoutListResponse)
async def all_payouts(status: str | None = None, actor: Actor = Depends(get_actor)) -> PayoutListResponse:
    payouts = list_payouts(actor, status)
    return PayoutListResponse(payouts=[PayoutResponse.model_validate(p.to_dict()) for p in payouts])


@payout_admin_router.put("/{payout_id}", response_model=PayoutResponse)
async def review_payout(
    payout_id: str,
    body: ReviewPayoutRequest,
    actor: Actor = Depends(get_actor),
) -> PayoutResponse:
    command = ReviewPayout(payout_id=payout_id, status=body.status, note=body.note, **actor.as_fields())
    return PayoutResponse.model_validate(current_domain.process(command, asynchronous=False))
