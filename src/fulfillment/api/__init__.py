"""Fulfillment domain API package."""

from fulfillment.api.routes import fulfillment_router

__all__ = ["fulfillment_router"]
