"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from the
internal entities and use-case signatures.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from catalogue.product.product import FulfillmentClass
from ordering.order.line import FulfillmentStatus
from ordering.order.order import SettlementStatus


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CartLineSchema(BaseModel):
    product_id: str | None = None
    variant_id: str | None = None
    collection_id: str | None = None
    quantity: int = Field(ge=1, default=1)
    customization: dict | None = None


class ShippingAddressSchema(BaseModel):
    full_name: str
    phone_number: str
    city: str
    address_line: str = ""


class ShippingBreakdownEntry(BaseModel):
    seller_id: str
    amount: int = Field(ge=0)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    cart_lines: list[CartLineSchema]
    payment_method: str
    proof: str | None = None
    payment_reference: str | None = None
    shipping_address: ShippingAddressSchema | None = None
    shipping_cost: int | None = Field(default=None, ge=0)
    shipping_breakdown: list[ShippingBreakdownEntry] | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "cart_lines": [
                        {"product_id": "prod-001", "quantity": 1},
                        {"collection_id": "coll-001"},
                    ],
                    "payment_method": "instapay",
                    "proof": "https://example.com/receipt.png",
                    "shipping_address": {
                        "full_name": "Mona Adel",
                        "phone_number": "01000000000",
                        "city": "Cairo",
                        "address_line": "12 Tahrir St",
                    },
                    "shipping_cost": 30,
                }
            ]
        }
    }


class AddCartItemRequest(CartLineSchema):
    pass


class RejectPaymentRequest(BaseModel):
    note: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class OrderLineResponse(BaseModel):
    id: str
    product_id: str | None
    variant_id: str | None
    collection_id: str | None
    title: str
    seller_id: str
    fulfillment_class: FulfillmentClass
    unit_price: int
    quantity: int
    platform_fee: int
    seller_earning: int
    fulfillment_status: FulfillmentStatus
    tracking_number: str | None
    carrier: str | None
    estimated_delivery_days: int | None
    rejection_reason: str | None


class ShippingChargeResponse(BaseModel):
    seller_id: str
    amount: int
    region_label: str | None
    delivery_min_days: int | None
    delivery_max_days: int | None


class OrderResponse(BaseModel):
    id: str
    checkout_id: str
    buyer_id: str
    fulfillment_class: FulfillmentClass
    total_amount: int
    platform_fee: int
    seller_earnings: int
    shipping_cost: int
    shipping_address: dict | None
    payment_method: str
    payment_proof_url: str | None
    payment_reference: str | None
    status: SettlementStatus
    is_verified: bool
    created_at: datetime
    paid_at: datetime | None
    lines: list[OrderLineResponse]
    shipping_charges: list[ShippingChargeResponse]


class CheckoutResponse(BaseModel):
    orders: list[OrderResponse]


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class CartItemResponse(BaseModel):
    id: str
    product_id: str | None
    variant_id: str | None
    collection_id: str | None
    quantity: int
    customization: dict | None


class CartItemIdResponse(BaseModel):
    cart_item_id: str


class CartResponse(BaseModel):
    items: list[CartItemResponse]


class StatusResponse(BaseModel):
    status: str = "ok"
