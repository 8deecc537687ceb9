"""Shared BDD fixtures and step definitions for orders."""

from decimal import Decimal

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from commerce.cart.items import AddToCart
from commerce.cart.queries import cart_count
from commerce.inventory.ledger import get_by_product
from commerce.order.order import Order
from commerce.order.queries import get_order


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def placed():
    """Holds the id of the order the scenario is working on."""
    return {"order_id": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered shopper", target_fixture="user_id")
def registered_shopper(register_user):
    return register_user(name="Olive Orderer", email="olive@example.com")


@given(parsers.cfparse('a product "{name}" priced "{price}" with {quantity:d} in stock'))
def product_in_stock(list_product, products, name, price, quantity):
    products[name] = list_product(name=name, price=price, quantity=quantity)


@given(parsers.cfparse('the shopper has {quantity:d} of "{name}" in the cart'))
def shopper_has_in_cart(user_id, products, quantity, name):
    current_domain.process(
        AddToCart(user_id=user_id, product_id=products[name], quantity=quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('an order is placed with status "{status}"'))
def order_placed_with_status(placed, status):
    assert placed["order_id"] is not None
    assert get_order(placed["order_id"]).status == status


@then(parsers.cfparse('the order total is "{total}"'))
def order_total_is(placed, total):
    assert get_order(placed["order_id"]).total_amount == Decimal(total)


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(placed, status):
    assert get_order(placed["order_id"]).status == status


@then(parsers.cfparse('the stock of "{name}" is {quantity:d}'))
def stock_is(products, name, quantity):
    assert get_by_product(products[name]).quantity == quantity


@then("no order is placed")
def no_order_placed():
    assert current_domain.repository_for(Order)._dao.query.all().total == 0


@then("the cart is empty")
def cart_is_empty(user_id):
    assert cart_count(user_id) == 0


@then(parsers.cfparse("the cart still has {count:d} lines"))
def cart_still_has(user_id, count):
    assert cart_count(user_id) == count
