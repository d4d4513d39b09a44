"""Earnings domain API package."""

from earnings.api.routes import earnings_router, payout_admin_router, payout_router

__all__ = ["earnings_router", "payout_router", "payout_admin_router"]
