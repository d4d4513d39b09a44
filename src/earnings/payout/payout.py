"""Payout: a seller's withdrawal request against their available balance.

State Machine:
    PENDING → PROCESSED
    PENDING → REJECTED

A pending payout already reserves its amount: the available balance subtracts
pending payouts as well as processed ones, so approval never re-checks it.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Dict, Identifier, Integer, String, Text

from shared.domain import hekayaty
from shared.errors import IllegalTransitionError


class PayoutStatus(Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    REJECTED = "rejected"


_VALID_TRANSITIONS = {
    PayoutStatus.PENDING: {PayoutStatus.PROCESSED, PayoutStatus.REJECTED},
    PayoutStatus.PROCESSED: set(),  # terminal
    PayoutStatus.REJECTED: set(),  # terminal
}


@hekayaty.aggregate
class Payout:
    seller_id = Identifier(required=True)
    amount = Integer(required=True, min_value=1)
    method = String(required=True, max_length=50)
    method_details = Dict()
    status = String(max_length=20, choices=PayoutStatus, default=PayoutStatus.PENDING.value)
    requested_at = DateTime(default=lambda: datetime.now(UTC))
    processed_at = DateTime()
    reviewed_by = Identifier()
    note = Text()

    def _assert_can_transition(self, target: PayoutStatus) -> None:
        current = PayoutStatus(self.status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise IllegalTransitionError(current.value, target.value)

    def process(self, admin_id: str, note: str | None = None) -> None:
        self._assert_can_transition(PayoutStatus.PROCESSED)
        self.status = PayoutStatus.PROCESSED.value
        self.processed_at = datetime.now(UTC)
        self.reviewed_by = admin_id
        self.note = note

    def reject(self, admin_id: str, note: str | None = None) -> None:
        self._assert_can_transition(PayoutStatus.REJECTED)
        self.status = PayoutStatus.REJECTED.value
        self.processed_at = datetime.now(UTC)
        self.reviewed_by = admin_id
        self.note = note
