"""Pydantic API schemas for the Shipping domain.

These are the external API contracts, separate from the entities.
"""

from pydantic import BaseModel, Field

from ordering.api.schemas import CartLineSchema


class CreateRateRequest(BaseModel):
    region_name: str = Field(min_length=1)
    amount: int = Field(ge=0)
    delivery_time_min: int | None = Field(default=None, ge=0)
    delivery_time_max: int | None = Field(default=None, ge=0)


class RateResponse(BaseModel):
    id: str
    seller_id: str
    region_name: str
    amount: int
    delivery_time_min: int | None
    delivery_time_max: int | None


class RateListResponse(BaseModel):
    rates: list[RateResponse]


class QuoteRequest(BaseModel):
    region: str
    cart_lines: list[CartLineSchema]


class SellerShippingResponse(BaseModel):
    seller_id: str
    amount: int
    region_name: str
    delivery_min_days: int | None
    delivery_max_days: int | None
    item_count: int
    unresolved: bool


class QuoteResponse(BaseModel):
    region: str
    total: int
    breakdown: list[SellerShippingResponse]
    unresolved_sellers: list[str]


class StatusResponse(BaseModel):
    status: str = "ok"
