"""Earnings & Payout Ledger.

    available = Σ earnings − Σ processed payouts − Σ pending payouts

A payout request bumps a counter on the seller in the same unit of work that
inserts the payout. Two concurrent requests therefore race on the seller's
version: the loser is retried against the new balance instead of spending
the same money twice.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Dict, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.seller.seller import Seller
from earnings.earning.earning import Earning, EarningStatus
from earnings.payout.payout import Payout, PayoutStatus
from shared.actor import Actor, Role, require_admin
from shared.domain import hekayaty
from shared.errors import AuthorizationError, InsufficientBalanceError

logger = structlog.get_logger(__name__)


def total_earnings(seller_id: str) -> int:
    earnings = current_domain.repository_for(Earning)._dao.query.filter(seller_id=seller_id).limit(None).all().items
    return sum(e.amount for e in earnings)


def total_payouts(seller_id: str, status: PayoutStatus) -> int:
    repo = current_domain.repository_for(Payout)
    payouts = repo._dao.query.filter(seller_id=seller_id, status=status.value).limit(None).all().items
    return sum(p.amount for p in payouts)


def available_balance(seller_id: str) -> int:
    return (
        total_earnings(seller_id)
        - total_payouts(seller_id, PayoutStatus.PROCESSED)
        - total_payouts(seller_id, PayoutStatus.PENDING)
    )


@hekayaty.command(part_of="Payout")
class RequestPayout:
    amount = Integer(required=True)
    method = String(max_length=50)
    method_details = Dict()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command(part_of="Payout")
class ReviewPayout:
    """Move a pending payout to ``processed`` or ``rejected``."""

    payout_id = Identifier(required=True)
    status = String(max_length=20, default=PayoutStatus.PROCESSED.value)
    note = Text()
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20)


@hekayaty.command_handler(part_of=Payout)
class PayoutHandler:
    @handle(RequestPayout)
    def request_payout(self, command):
        """Request a payout of ``amount`` for the acting seller."""
        actor = Actor.of(command)
        amount = command.amount
        currency = hekayaty.currency
        if actor.role is Role.READER:
            raise AuthorizationError({"actor": ["Readers cannot request payouts"]})
        if amount <= 0:
            raise ValidationError({"amount": ["Payout amount must be positive"]})
        if amount < hekayaty.minimum_payout:
            raise ValidationError({"amount": [f"Minimum payout amount is {hekayaty.minimum_payout} {currency}"]})

        seller_repo = current_domain.repository_for(Seller)
        seller = seller_repo.get(actor.user_id)
        if not seller.is_active:
            raise AuthorizationError({"actor": ["Frozen accounts cannot request payouts"]})

        balance = available_balance(str(seller.id))
        if amount > balance:
            logger.warning(
                "Payout refused: insufficient balance",
                seller_id=str(seller.id),
                requested=amount,
                available=balance,
            )
            raise InsufficientBalanceError({"amount": [f"Insufficient balance. Available: {balance} {currency}"]})

        seller.claim_payout_slot()
        seller_repo.add(seller)

        payout = Payout(
            seller_id=str(seller.id),
            amount=amount,
            method=command.method or hekayaty.default_payout_method,
            method_details=command.method_details or {},
        )
        current_domain.repository_for(Payout).add(payout)

        logger.info("Payout requested", payout_id=str(payout.id), seller_id=actor.user_id, amount=amount)
        return str(payout.id)

    @handle(ReviewPayout)
    def review_payout(self, command):
        actor = Actor.of(command)
        require_admin(actor, "review payouts")
        try:
            target = PayoutStatus(command.status)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown payout status '{command.status}'"]}) from exc

        repo = current_domain.repository_for(Payout)
        payout = repo.get(command.payout_id)

        if target is PayoutStatus.PROCESSED:
            payout.process(actor.user_id, command.note)
            repo.add(payout)
            settled = _settle_earnings(str(payout.seller_id))
        elif target is PayoutStatus.REJECTED:
            payout.reject(actor.user_id, command.note)
            repo.add(payout)
            settled = 0
        else:
            raise ValidationError({"status": ["A payout can only be processed or rejected"]})

        logger.info(
            "Payout reviewed",
            payout_id=str(payout.id),
            seller_id=str(payout.seller_id),
            status=payout.status,
            earnings_settled=settled,
            admin_id=actor.user_id,
        )
        return payout.to_dict()


def _settle_earnings(seller_id: str) -> int:
    """Mark the oldest earnings covered by everything paid out so far as paid out."""
    covered = total_payouts(seller_id, PayoutStatus.PROCESSED)
    repo = current_domain.repository_for(Earning)

    running = 0
    settled = 0
    for earning in repo.for_seller(seller_id):
        running += earning.amount
        if running > covered:
            break
        if earning.status == EarningStatus.PENDING.value:
            earning.mark_paid_out()
            repo.add(earning)
            settled += 1
    return settled


def list_payouts(actor: Actor, status: str | None = None) -> list[Payout]:
    """All payouts, newest first, optionally filtered by status (admin only)."""
    require_admin(actor, "list payouts")
    query = current_domain.repository_for(Payout)._dao.query
    if status and status != "all":
        try:
            query = query.filter(status=PayoutStatus(status).value)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown payout status '{status}'"]}) from exc
    return query.order_by(["-requested_at", "id"]).limit(None).all().items
