"""FastAPI routes for the Shipping domain: rate tables and quotes."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from ordering.cart.cart import CartLine
from ordering.checkout.quote import quote_cart_shipping
from shared.actor import Actor
from shared.http import get_actor
from shipping.api.schemas import (
    CreateRateRequest,
    QuoteRequest,
    QuoteResponse,
    RateListResponse,
    RateResponse,
    SellerShippingResponse,
    StatusResponse,
)
from shipping.rate.management import DefineShippingRate, DeleteShippingRate, list_rates
from shipping.rate.rate import ShippingRate

shipping_router = APIRouter(prefix="/shipping", tags=["shipping"])


@shipping_router.post("/quote", response_model=QuoteResponse)
async def quote(body: QuoteRequest, actor: Actor = Depends(get_actor)) -> QuoteResponse:
    """Quote shipping for a cart before checkout."""
    lines = [
        CartLine(
            quantity=line.quantity,
            product_id=line.product_id,
            variant_id=line.variant_id,
            collection_id=line.collection_id,
        )
        for line in body.cart_lines
    ]
    result = quote_cart_shipping(body.region, lines)
    return QuoteResponse(
        region=result.region,
        total=result.total,
        breakdown=[
            SellerShippingResponse(
                seller_id=a.seller_id,
                amount=a.amount,
                region_name=a.region_label,
                delivery_min_days=a.delivery_min_days,
                delivery_max_days=a.delivery_max_days,
                item_count=a.item_count,
                unresolved=a.unresolved,
            )
            for a in result.allocations.values()
        ],
        unresolved_sellers=result.unresolved_sellers,
    )


@shipping_router.get("/rates", response_model=RateListResponse)
async def my_rates(actor: Actor = Depends(get_actor)) -> RateListResponse:
    rates = list_rates(actor.user_id)
    return RateListResponse(rates=[RateResponse.model_validate(r.to_dict()) for r in rates])


@shipping_router.post("/rates", status_code=201, response_model=RateResponse)
async def add_rate(body: CreateRateRequest, actor: Actor = Depends(get_actor)) -> RateResponse:
    command = DefineShippingRate(
        region_name=body.region_name,
        amount=body.amount,
        delivery_time_min=body.delivery_time_min,
        delivery_time_max=body.delivery_time_max,
        **actor.as_fields(),
    )
    rate_id = current_domain.process(command, asynchronous=False)
    return RateResponse.model_validate(current_domain.repository_for(ShippingRate).get(rate_id).to_dict())


@shipping_router.delete("/rates/{rate_id}", response_model=StatusResponse)
async def remove_rate(rate_id: str, actor: Actor = Depends(get_actor)) -> StatusResponse:
    current_domain.process(DeleteShippingRate(rate_id=rate_id, **actor.as_fields()), asynchronous=False)
    return StatusResponse()
