"""Shared BDD fixtures and step definitions for the Fulfillment domain."""

import pytest
from fulfillment.history.history import StatusHistory
from ordering.order.line import OrderLine
from protean import current_domain
from pytest_bdd import given, parsers, then
from shared.errors import AuthorizationError, IllegalTransitionError


@pytest.fixture()
def error():
    """Container for the exception raised by the last When step."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the marketplace catalog", target_fixture="seeded")
def _(catalog):
    return catalog


@given(parsers.cfparse('the buyer ordered "{product_id}" paid by "{method}"'), target_fixture="line_id")
def _(seeded, place_order, lines_of, product_id, method):
    (order,) = place_order({"product_id": product_id}, payment_method=method)
    return str(lines_of(order)[0].id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with an illegal transition")
def _(error):
    assert error["exc"] is not None, "Expected an illegal transition but none was raised"
    assert isinstance(error["exc"], IllegalTransitionError)


@then("the action is forbidden")
def _(error):
    assert isinstance(error["exc"], AuthorizationError)


@then(parsers.cfparse('the line status is "{status}"'))
def _(line_id, status):
    assert current_domain.repository_for(OrderLine).get(line_id).fulfillment_status == status


@then(parsers.cfparse('the line history reads "{statuses}"'))
def _(line_id, statuses):
    entries = current_domain.repository_for(StatusHistory).for_line(line_id)
    assert [e.status for e in entries] == [s.strip() for s in statuses.split(",")]


@then(parsers.cfparse('the latest history note is "{note}"'))
def _(line_id, note):
    assert current_domain.repository_for(StatusHistory).for_line(line_id)[-1].note == note


@then(parsers.cfparse("the buyer received {count:d} push notifications"))
def _(push, count):
    assert len(push.delivered_to("buyer-001")) == count
