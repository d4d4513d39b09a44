"""FastAPI routes for the Ordering domain: cart, checkout, orders, payments."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddCartItemRequest,
    CartItemIdResponse,
    CartItemResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    OrderListResponse,
    OrderResponse,
    RejectPaymentRequest,
    StatusResponse,
)
from ordering.cart.items import AddToCart, RemoveCartItem, list_cart
from ordering.checkout.checkout import PlaceOrder
from ordering.order.payment import RejectPayment, VerifyPayment
from ordering.order.queries import OrderView, get_order, list_buyer_orders, list_orders_by_status
from shared.actor import Actor
from shared.http import get_actor


def order_response(view: OrderView) -> OrderResponse:
    return OrderResponse.model_validate(
        {
            **view.order.to_dict(),
            "lines": [line.to_dict() for line in view.lines],
        }
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("/items", response_model=CartResponse)
async def get_cart(actor: Actor = Depends(get_actor)) -> CartResponse:
    items = list_cart(actor.user_id)
    return CartResponse(items=[CartItemResponse.model_validate(i.to_dict()) for i in items])


@cart_router.post("/items", status_code=201, response_model=CartItemIdResponse)
async def add_cart_item(body: AddCartItemRequest, actor: Actor = Depends(get_actor)) -> CartItemIdResponse:
    command = AddToCart(
        product_id=body.product_id,
        variant_id=body.variant_id,
        collection_id=body.collection_id,
        quantity=body.quantity,
        customization=body.customization or {},
        **actor.as_fields(),
    )
    result = current_domain.process(command, asynchronous=False)
    return CartItemIdResponse(cart_item_id=result)


@cart_router.delete("/items/{cart_item_id}", response_model=StatusResponse)
async def delete_cart_item(cart_item_id: str, actor: Actor = Depends(get_actor)) -> StatusResponse:
    current_domain.process(RemoveCartItem(cart_item_id=cart_item_id, **actor.as_fields()), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout / Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(tags=["orders"])


@order_router.post("/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout_cart(body: CheckoutRequest, actor: Actor = Depends(get_actor)) -> CheckoutResponse:
    """Place one order per fulfillment class from the submitted cart lines."""
    command = PlaceOrder(
        cart_lines=[line.model_dump() for line in body.cart_lines],
        payment_method=body.payment_method,
        proof=body.proof,
        payment_reference=body.payment_reference,
        shipping_address=body.shipping_address.model_dump() if body.shipping_address else {},
        shipping_cost=body.shipping_cost,
        shipping_breakdown=(
            {entry.seller_id: entry.amount for entry in body.shipping_breakdown} if body.shipping_breakdown else {}
        ),
        **actor.as_fields(),
    )
    order_ids = current_domain.process(command, asynchronous=False)
    return CheckoutResponse(orders=[order_response(get_order(actor, order_id)) for order_id in order_ids])


@order_router.get("/orders", response_model=OrderListResponse)
async def my_orders(actor: Actor = Depends(get_actor)) -> OrderListResponse:
    return OrderListResponse(orders=[order_response(v) for v in list_buyer_orders(actor)])


@order_router.get("/orders/{order_id}", response_model=OrderResponse)
async def order_detail(order_id: str, actor: Actor = Depends(get_actor)) -> OrderResponse:
    return order_response(get_order(actor, order_id))


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_order_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@admin_order_router.get("", response_model=OrderListResponse)
async def admin_orders(status: str = "pending", actor: Actor = Depends(get_actor)) -> OrderListResponse:
    return OrderListResponse(orders=[order_response(v) for v in list_orders_by_status(actor, status)])


@admin_order_router.post("/{order_id}/verify-payment", response_model=OrderResponse)
async def verify_order_payment(order_id: str, actor: Actor = Depends(get_actor)) -> OrderResponse:
    """Mark a manually settled order as paid and realize seller earnings."""
    current_domain.process(VerifyPayment(order_id=order_id, **actor.as_fields()), asynchronous=False)
    return order_response(get_order(actor, order_id))


@admin_order_router.post("/{order_id}/reject-payment", response_model=OrderResponse)
async def reject_order_payment(
    order_id: str,
    body: RejectPaymentRequest | None = None,
    actor: Actor = Depends(get_actor),
) -> OrderResponse:
    command = RejectPayment(order_id=order_id, note=body.note if body else None, **actor.as_fields())
    current_domain.process(command, asynchronous=False)
    return order_response(get_order(actor, order_id))
