"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import parsers, then


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer_id():
    return "user-001"


@pytest.fixture()
def address():
    return {"address": "1 Main St", "city": "Springfield", "postal_code": "62701", "country": "US"}


@pytest.fixture()
def error():
    """Container for errors captured by When steps."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Then steps — Order (shared, plain assertions)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse('the request is rejected with "{error_name}"'))
def _(error, error_name):
    assert error["exc"] is not None
    assert type(error["exc"]).__name__ == error_name
