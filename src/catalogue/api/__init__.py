"""Catalogue domain API package."""

from catalogue.api.routes import seller_admin_router

__all__ = ["seller_admin_router"]
