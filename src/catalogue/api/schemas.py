"""Pydantic API schemas for the Catalogue domain.

These are the external API contracts, separate from the entities.
"""

from pydantic import BaseModel, Field


class SetSellerActiveRequest(BaseModel):
    is_active: bool


class SetCommissionRateRequest(BaseModel):
    commission_rate: int | None = Field(default=None, ge=0, le=100)


class SellerResponse(BaseModel):
    id: str
    display_name: str
    commission_rate: int | None
    is_active: bool
