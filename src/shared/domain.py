"""Domain composition root for the Hekayaty order engine.

A single Protean domain hosts every context. Checkout writes orders, lines,
earnings, stock and cart rows in one transaction, and a single domain keeps
all of them on one provider and one unit of work.

Configuration comes from ``domain.toml`` beside this module. ``PROTEAN_ENV``
selects the overlay (``test``, ``production``) and ``[custom]`` values land
on the domain as attributes, e.g. ``hekayaty.physical_rate``.
"""

import structlog
from protean.domain import Domain

hekayaty = Domain(name="hekayaty")

logger = structlog.get_logger(__name__)

_initialized = False


def init_domain() -> Domain:
    """Register every domain element and initialize the domain once."""
    global _initialized
    if _initialized:
        return hekayaty

    # Element modules register themselves on import
    import catalogue.collection.collection  # noqa: F401
    import catalogue.product.product  # noqa: F401
    import catalogue.product.stock  # noqa: F401
    import catalogue.seller.management  # noqa: F401
    import catalogue.seller.seller  # noqa: F401
    import earnings.earning.earning  # noqa: F401
    import earnings.payout.ledger  # noqa: F401
    import earnings.payout.payout  # noqa: F401
    import fulfillment.history.history  # noqa: F401
    import fulfillment.line.acceptance  # noqa: F401
    import fulfillment.line.cancellation  # noqa: F401
    import fulfillment.line.delivery  # noqa: F401
    import fulfillment.line.preparation  # noqa: F401
    import fulfillment.line.rejection  # noqa: F401
    import fulfillment.line.shipping  # noqa: F401
    import notifications.notification.dispatch  # noqa: F401
    import notifications.notification.fulfillment_events  # noqa: F401
    import notifications.notification.inbox  # noqa: F401
    import notifications.notification.notification  # noqa: F401
    import notifications.notification.ordering_events  # noqa: F401
    import ordering.cart.items  # noqa: F401
    import ordering.checkout.checkout  # noqa: F401
    import ordering.order.line  # noqa: F401
    import ordering.order.order  # noqa: F401
    import ordering.order.payment  # noqa: F401
    import shipping.rate.management  # noqa: F401
    import shipping.rate.rate  # noqa: F401

    hekayaty.init(traverse=False)
    _initialized = True
    logger.info("Domain initialized", domain=hekayaty.name, env=hekayaty.config.get("env"))
    return hekayaty
