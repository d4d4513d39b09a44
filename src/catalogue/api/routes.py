"""FastAPI routes for the Catalogue domain: admin seller management."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from catalogue.api.schemas import SellerResponse, SetCommissionRateRequest, SetSellerActiveRequest
from catalogue.seller.management import SetCommissionRate, SetSellerActive
from shared.actor import Actor
from shared.http import get_actor

seller_admin_router = APIRouter(prefix="/admin/sellers", tags=["admin"])


@seller_admin_router.put("/{seller_id}/active", response_model=SellerResponse)
async def update_seller_active(
    seller_id: str,
    body: SetSellerActiveRequest,
    actor: Actor = Depends(get_actor),
) -> SellerResponse:
    """Freeze or unfreeze a seller account."""
    command = SetSellerActive(seller_id=seller_id, is_active=body.is_active, **actor.as_fields())
    return SellerResponse.model_validate(current_domain.process(command, asynchronous=False))


@seller_admin_router.put("/{seller_id}/commission-rate", response_model=SellerResponse)
async def update_commission_rate(
    seller_id: str,
    body: SetCommissionRateRequest,
    actor: Actor = Depends(get_actor),
) -> SellerResponse:
    command = SetCommissionRate(seller_id=seller_id, commission_rate=body.commission_rate, **actor.as_fields())
    return SellerResponse.model_validate(current_domain.process(command, asynchronous=False))
