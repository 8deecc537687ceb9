"""Shared BDD fixtures and step definitions for shopping carts."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from commerce.cart.queries import cart_count, list_cart
from commerce.shared.exceptions import InsufficientStockError


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered shopper", target_fixture="user_id")
def registered_shopper(register_user):
    return register_user(name="Sam Shopper", email="sam@example.com")


@given(parsers.cfparse('a product "{name}" priced "{price}" with {quantity:d} in stock'))
def product_in_stock(list_product, products, name, price, quantity):
    products[name] = list_product(name=name, price=price, quantity=quantity)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with insufficient stock")
def fails_with_insufficient_stock(error):
    assert isinstance(error["exc"], InsufficientStockError), f"Got {error['exc']!r}"


@then("the action fails with a validation error")
def fails_with_validation_error(error):
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the cart holds {quantity:d} of "{name}"'))
def cart_holds(user_id, products, quantity, name):
    lines = {str(item.product_id): item.quantity for item in list_cart(user_id)}
    assert lines.get(products[name]) == quantity


@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_lines(user_id, count):
    assert cart_count(user_id) == count


@then("the cart is empty")
def cart_is_empty(user_id):
    assert cart_count(user_id) == 0
