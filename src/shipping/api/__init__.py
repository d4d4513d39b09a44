"""Shipping domain API package."""

from shipping.api.routes import shipping_router

__all__ = ["shipping_router"]
