"""Pydantic API schemas for the Earnings domain.

These are the external API contracts, separate from the entities.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from earnings.earning.earning import EarningStatus
from earnings.payout.payout import PayoutStatus


class RequestPayoutRequest(BaseModel):
    amount: int = Field(gt=0)
    method: str | None = None
    method_details: dict | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "amount": 500,
                    "method": "vodafone_cash",
                    "method_details": {"phone_number": "01000000000"},
                }
            ]
        }
    }


class ReviewPayoutRequest(BaseModel):
    status: str = PayoutStatus.PROCESSED.value
    note: str | None = None


class EarningResponse(BaseModel):
    id: str
    order_id: str
    amount: int
    gross_amount: int
    platform_fee: int
    shipping_amount: int
    units: int
    status: EarningStatus
    created_at: datetime


class PayoutResponse(BaseModel):
    id: str
    seller_id: str
    amount: int
    method: str
    method_details: dict | None
    status: PayoutStatus
    requested_at: datetime
    processed_at: datetime | None
    note: str | None


class PayoutListResponse(BaseModel):
    payouts: list[PayoutResponse]


class EarningsOverviewResponse(BaseModel):
    seller_id: str
    total_earnings: int
    total_gross: int
    units_sold: int
    platform_commission: int
    shipping_earned: int
    paid_out: int
    pending_payouts: int
    available_balance: int
    recent_earnings: list[EarningResponse]
    payout_history: list[PayoutResponse]
