"""Application tests for cart commands and read helpers."""

from decimal import Decimal

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

from commerce.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItemQuantity
from commerce.cart.queries import cart_count, cart_total, get_cart_item, list_cart, list_cart_with_details
from commerce.catalogue.product_management import DeleteProduct
from commerce.shared.exceptions import BusinessRuleError, InsufficientStockError


def _add(user_id, product_id, quantity):
    return current_domain.process(
        AddToCart(user_id=user_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


class TestAddToCart:
    def test_adds_line(self, register_user, list_product):
        user_id = register_user()
        product_id = list_product(quantity=5)

        line = _add(user_id, product_id, 2)

        assert line.quantity == 2
        assert get_cart_item(user_id, product_id).quantity == 2

    def test_repeated_adds_merge(self, register_user, list_product):
        user_id = register_user()
        product_id = list_product(quantity=5)
        _add(user_id, product_id, 2)
        _add(user_id, product_id, 3)

        assert cart_count(user_id) == 1
        assert get_cart_item(user_id, product_id).quantity == 5

    def test_merge_beyond_stock_keeps_old_quantity(self, register_user, list_product):
        user_id = register_user()
        product_id = list_product(quantity=5)
        _add(user_id, product_id, 4)

        with pytest.raises(InsufficientStockError):
            _add(user_id, product_id, 2)
        assert get_cart_item(user_id, product_id).quantity == 4

    def test_adding_does_not_touch_stock(self, register_user, list_product, stock_of):
        user_id = register_user()
        product_id = list_product(quantity=5)
        _add(user_id, product_id, 3)
        assert stock_of(product_id) == 5

    def test_unknown_user(self, list_product):
        with pytest.raises(ObjectNotFoundError):
            _add("ghost", list_product(), 1)

    def test_unknown_product(self, register_user):
        with pytest.raises(ObjectNotFoundError):
            _add(register_user(), "nope", 1)

    def test_non_positive_quantity(self, register_user, list_product):
        with pytest.raises(BusinessRuleError):
            _add(register_user(), list_product(), 0)


class TestUpdateAndRemove:
    def test_update_quantity(self, register_user, list_product):
        user_id = register_user()
        product_id = list_product(quantity=9)
        _add(user_id, product_id, 1)

        current_domain.process(
            UpdateCartItemQuantity(user_id=user_id, product_id=product_id, quantity=8),
            asynchronous=False,
        )

        assert get_cart_item(user_id, product_id).quantity == 8

    def test_update_missing_line(self, register_user, list_product):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdateCartItemQuantity(user_id=register_user(), product_id=list_product(), quantity=1),
                asynchronous=False,
            )

    def test_remove(self, register_user, list_product):
        user_id = register_user()
        product_id = list_product()
        _add(user_id, product_id, 1)

        current_domain.process(RemoveFromCart(user_id=user_id, product_id=product_id), asynchronous=False)

        assert list_cart(user_id) == []

    def test_clear(self, register_user, list_product):
        user_id = register_user()
        _add(user_id, list_product(name="One"), 1)
        _add(user_id, list_product(name="Two"), 1)

        current_domain.process(ClearCart(user_id=user_id), asynchronous=False)

        assert cart_count(user_id) == 0

    def test_clear_without_cart(self, register_user):
        user_id = register_user()
        current_domain.process(ClearCart(user_id=user_id), asynchronous=False)
        assert cart_count(user_id) == 0


class TestCartDetails:
    def test_lines_in_added_order_with_prices(self, register_user, list_product):
        user_id = register_user()
        pen = list_product(name="Pen", price="1.50")
        pad = list_product(name="Pad", price="4.00")
        _add(user_id, pen, 2)
        _add(user_id, pad, 1)

        lines = list_cart_with_details(user_id)

        assert [line.product_name for line in lines] == ["Pen", "Pad"]
        assert lines[0].line_total == Decimal("3.00")
        assert cart_total(user_id) == Decimal("7.00")

    def test_delisted_products_are_skipped(self, register_user, list_product):
        user_id = register_user()
        pen = list_product(name="Pen")
        pad = list_product(name="Pad")
        _add(user_id, pen, 1)
        _add(user_id, pad, 1)

        current_domain.process(DeleteProduct(product_id=pen), asynchronous=False)

        assert [line.product_name for line in list_cart_with_details(user_id)] == ["Pad"]

    def test_list_cart_requires_user(self):
        with pytest.raises(ObjectNotFoundError):
            list_cart("ghost")

    def test_missing_cart_item(self, register_user):
        with pytest.raises(ObjectNotFoundError):
            get_cart_item(register_user(), "nope")
