"""Application tests for explicit order creation."""

import json
from decimal import Decimal

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

from commerce.order.creation import CreateOrder
from commerce.order.order import Order
from commerce.order.queries import get_order
from commerce.shared.exceptions import BusinessRuleError, InsufficientStockError


def _create_order(user_id, items):
    return current_domain.process(CreateOrder(user_id=user_id, items=json.dumps(items)), asynchronous=False)


def _order_count():
    return current_domain.repository_for(Order)._dao.query.all().total


class TestCreateOrder:
    def test_total_from_given_prices(self, register_user, list_product):
        user_id = register_user()
        p1 = list_product(name="Mug", price="12.00", quantity=10)
        p2 = list_product(name="Tea", price="6.00", quantity=10)

        order_id = _create_order(
            user_id,
            [
                {"product_id": p1, "quantity": 2, "unit_price": "10.00"},
                {"product_id": p2, "quantity": 1, "unit_price": "5.00"},
            ],
        )

        order = get_order(order_id)
        assert order.total_amount == Decimal("25.00")
        assert order.status == "pending"

    def test_price_defaults_to_current_product_price(self, register_user, list_product):
        user_id = register_user()
        product_id = list_product(price="7.25", quantity=10)

        order = get_order(_create_order(user_id, [{"product_id": product_id, "quantity": 2}]))

        assert order.items[0].unit_price == Decimal("7.25")
        assert order.total_amount == Decimal("14.50")

    def test_reduces_stock(self, register_user, list_product, stock_of):
        user_id = register_user()
        product_id = list_product(quantity=10)

        _create_order(user_id, [{"product_id": product_id, "quantity": 3}])

        assert stock_of(product_id) == 7

    def test_oversell_creates_nothing(self, register_user, list_product, stock_of):
        user_id = register_user()
        plenty = list_product(name="Plenty", quantity=10)
        scarce = list_product(name="Scarce", quantity=1)

        with pytest.raises(InsufficientStockError) as exc:
            _create_order(
                user_id,
                [
                    {"product_id": plenty, "quantity": 5},
                    {"product_id": scarce, "quantity": 2},
                ],
            )

        assert "Scarce" in exc.value.messages["quantity"][0]
        assert stock_of(plenty) == 10
        assert stock_of(scarce) == 1
        assert _order_count() == 0

    def test_same_product_twice_is_checked_in_total(self, register_user, list_product, stock_of):
        user_id = register_user()
        product_id = list_product(quantity=3)

        with pytest.raises(InsufficientStockError):
            _create_order(
                user_id,
                [
                    {"product_id": product_id, "quantity": 2},
                    {"product_id": product_id, "quantity": 2},
                ],
            )
        assert stock_of(product_id) == 3

    def test_unknown_user(self, list_product):
        with pytest.raises(ObjectNotFoundError):
            _create_order("ghost", [{"product_id": list_product(), "quantity": 1}])

    def test_unknown_product(self, register_user):
        with pytest.raises(ObjectNotFoundError):
            _create_order(register_user(), [{"product_id": "nope", "quantity": 1}])

    def test_empty_items(self, register_user):
        with pytest.raises(BusinessRuleError):
            _create_order(register_user(), [])

    def test_non_positive_quantity(self, register_user, list_product):
        with pytest.raises(BusinessRuleError):
            _create_order(register_user(), [{"product_id": list_product(), "quantity": 0}])

    def test_frozen_price_survives_price_change(self, register_user, list_product):
        from commerce.catalogue.product_management import UpdateProduct

        user_id = register_user()
        product_id = list_product(price="10.00", quantity=5)
        order_id = _create_order(user_id, [{"product_id": product_id, "quantity": 1}])

        current_domain.process(UpdateProduct(product_id=product_id, price="99.00"), asynchronous=False)

        order = get_order(order_id)
        assert order.items[0].unit_price == Decimal("10.00")
        assert order.total_amount == Decimal("10.00")


class TestCreateOrderRollback:
    def test_failure_after_stock_reduction_restores_ledger(self, register_user, list_product, stock_of, monkeypatch):
        user_id = register_user()
        p1 = list_product(name="Mug", quantity=5)
        p2 = list_product(name="Tea", quantity=5)

        def _fail(cls, user_id, lines, status=None):
            raise RuntimeError("order store unavailable")

        monkeypatch.setattr(Order, "place", classmethod(_fail))

        with pytest.raises(RuntimeError):
            _create_order(user_id, [{"product_id": p1, "quantity": 2}, {"product_id": p2, "quantity": 3}])

        assert (stock_of(p1), stock_of(p2)) == (5, 5)
        assert _order_count() == 0
