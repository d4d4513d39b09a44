"""Seller profile.

A seller is any creator account that lists products or collections. The
profile carries the two settings money flows depend on: the digital
commission rate and whether the account is active.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String

from shared.domain import hekayaty

MAX_COMMISSION_RATE = 100


@hekayaty.aggregate
class Seller:
    display_name = String(required=True, max_length=200)
    # Percent; None falls back to the configured default digital rate
    commission_rate = Integer(min_value=0, max_value=MAX_COMMISSION_RATE)
    is_active = Boolean(default=True)
    # Bumped by every payout request so concurrent requests serialize on the row
    payout_requests = Integer(default=0)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    def freeze(self) -> None:
        self.is_active = False

    def unfreeze(self) -> None:
        self.is_active = True

    def set_commission_rate(self, rate: int | None) -> None:
        if rate is not None and not 0 <= rate <= MAX_COMMISSION_RATE:
            raise ValidationError(
                {"commission_rate": [f"Commission rate must be between 0 and {MAX_COMMISSION_RATE}"]}
            )
        self.commission_rate = rate

    def claim_payout_slot(self) -> None:
        """Serialize payout requests through the seller's version."""
        self.payout_requests = (self.payout_requests or 0) + 1
