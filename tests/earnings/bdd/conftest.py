"""Shared BDD fixtures and step definitions for the Earnings domain."""

import pytest
from earnings.earning.earning import Earning
from earnings.payout.ledger import available_balance, total_payouts
from earnings.payout.payout import PayoutStatus
from notifications.notification.inbox import list_notifications
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then
from shared.errors import IllegalTransitionError


@pytest.fixture()
def error():
    """Container for the exception raised by the last When step."""
    return {"exc": None}


@pytest.fixture()
def physical_order():
    """Reload the physical order out of the orders placed at checkout."""

    def _load(orders) -> Order:
        order = next(o for o in orders if o.fulfillment_class == "physical")
        return current_domain.repository_for(Order).get(str(order.id))

    return _load


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the marketplace catalog", target_fixture="seeded")
def _(catalog):
    return catalog


@given(parsers.cfparse('the buyer checked out the Cairo cart paid by "{method}"'), target_fixture="orders")
def _(seeded, place_order, method):
    return place_order(
        {"product_id": seeded.mug.id},
        {"collection_id": seeded.bundle.id},
        payment_method=method,
        shipping_cost=30,
    )


@given(parsers.cfparse('the buyer bought "{product_id}" paid by "{method}"'), target_fixture="orders")
def _(seeded, place_order, product_id, method):
    return place_order({"product_id": product_id}, payment_method=method)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with an illegal transition")
def _(error):
    assert error["exc"] is not None, "Expected an illegal transition but none was raised"
    assert isinstance(error["exc"], IllegalTransitionError)


@then(parsers.cfparse("the physical order totals {total:d} with a platform fee of {fee:d}"))
def _(orders, physical_order, total, fee):
    order = physical_order(orders)
    assert (order.total_amount, order.platform_fee) == (total, fee)


@then(parsers.cfparse('the physical order status is "{status}"'))
def _(orders, physical_order, status):
    assert physical_order(orders).status == status


@then(parsers.cfparse('seller "{seller_id}" has an available balance of {amount:d}'))
def _(seller_id, amount):
    assert available_balance(seller_id) == amount


@then(parsers.cfparse('seller "{seller_id}" has been paid out {amount:d}'))
def _(seller_id, amount):
    assert total_payouts(seller_id, PayoutStatus.PROCESSED) == amount


@then(parsers.cfparse('every earning of seller "{seller_id}" is "{status}"'))
def _(seller_id, status):
    earnings = current_domain.repository_for(Earning).for_seller(seller_id)
    assert earnings
    assert {e.status for e in earnings} == {status}


@then(parsers.cfparse('the buyer was told "{message}"'))
def _(buyer, message):
    assert message in [n.message for n in list_notifications(buyer)]
