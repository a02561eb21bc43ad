"""Shared BDD fixtures and step definitions for ordering."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.order.order import Order


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def context():
    """Scratch space shared between the steps of one scenario."""
    return {}


@given("a buyer with an empty cart", target_fixture="cart")
def empty_cart():
    return Cart.create(user_id="buyer-001")


@then("no order exists")
def no_order_exists():
    assert current_domain.repository_for(Order)._dao.query.all().items == []


@then(parsers.cfparse("the cart has {count:d} line"))
@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(cart, count):
    assert len(cart.items) == count
