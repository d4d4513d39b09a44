"""Pricing Resolver.

Resolves the authoritative unit price, owning seller and fulfillment class
for a cart reference. Client-supplied prices are never consulted.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from catalogue.collection.collection import Collection
from catalogue.product.product import FulfillmentClass, Product, ProductVariant
from shared.errors import InvalidCartError, StaleReferenceError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PricedReference:
    unit_price: int
    seller_id: str
    fulfillment_class: FulfillmentClass
    title: str
    product_id: str | None = None
    variant_id: str | None = None
    collection_id: str | None = None


def _load(aggregate_cls, identifier):
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        return None


def resolve_price(
    product_id: str | None = None,
    variant_id: str | None = None,
    collection_id: str | None = None,
) -> PricedReference:
    """Resolve a product, product+variant or collection reference.

    Raises:
        InvalidCartError: the reference names neither or both of product and collection
        StaleReferenceError: the product or collection is gone or soft-deleted
    """
    if bool(product_id) == bool(collection_id):
        raise InvalidCartError({"cart_line": ["A cart line must reference exactly one product or collection"]})

    if collection_id:
        collection = _load(Collection, collection_id)
        if collection is None or collection.is_deleted:
            logger.warning("Stale collection reference", collection_id=collection_id)
            raise StaleReferenceError({"collection_id": [f"Collection {collection_id} is no longer available"]})
        return PricedReference(
            unit_price=collection.bundle_price,
            seller_id=str(collection.seller_id),
            fulfillment_class=FulfillmentClass.DIGITAL,
            title=collection.title,
            collection_id=str(collection.id),
        )

    product = _load(Product, product_id)
    if product is None or product.is_deleted:
        logger.warning("Stale product reference", product_id=product_id)
        raise StaleReferenceError({"product_id": [f"Product {product_id} is no longer available"]})

    unit_price = product.price
    resolved_variant_id = None
    if variant_id:
        variant = _load(ProductVariant, variant_id)
        # A variant of some other product is ignored, not trusted
        if variant is not None and str(variant.product_id) == str(product.id):
            unit_price = variant.price
            resolved_variant_id = str(variant.id)
        else:
            logger.info("Variant of another product ignored", product_id=str(product.id), variant_id=variant_id)

    return PricedReference(
        unit_price=unit_price,
        seller_id=str(product.seller_id),
        fulfillment_class=product.fulfillment_class,
        title=product.title,
        product_id=str(product.id),
        variant_id=resolved_variant_id,
    )
