"""Application tests for cancelling orders and restoring stock."""

from decimal import Decimal

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

from commerce.catalogue.product_management import DeleteProduct
from commerce.order.cancellation import CancelOrder
from commerce.order.placement import CancellationResult
from commerce.order.queries import get_order
from commerce.order.status import UpdateOrderStatus
from commerce.shared.exceptions import InvalidStateTransitionError


def _cancel(order_id):
    return current_domain.process(CancelOrder(order_id=order_id), asynchronous=False)


class TestCancelOrder:
    def test_round_trip_restores_stock(self, list_product, place_order, stock_of):
        p1 = list_product(name="P1", quantity=10)
        p2 = list_product(name="P2", quantity=4)

        order_id = place_order((p1, 2, "10.00"), (p2, 1, "5.00"))
        order = get_order(order_id)
        assert order.total_amount == Decimal("25.00")
        assert order.status == "pending"
        assert (stock_of(p1), stock_of(p2)) == (8, 3)

        result = _cancel(order_id)

        assert result == CancellationResult(order_id=order_id, status="cancelled", restock_failures=())
        assert result.fully_restocked
        assert get_order(order_id).status == "cancelled"
        assert (stock_of(p1), stock_of(p2)) == (10, 4)

    def test_confirmed_and_processing_can_be_cancelled(self, list_product, place_order, stock_of):
        product_id = list_product(quantity=5)
        order_id = place_order((product_id, 2))
        current_domain.process(UpdateOrderStatus(order_id=order_id, status="confirmed"), asynchronous=False)
        current_domain.process(UpdateOrderStatus(order_id=order_id, status="processing"), asynchronous=False)

        _cancel(order_id)

        assert stock_of(product_id) == 5

    def test_shipped_order_cannot_be_cancelled(self, list_product, place_order, stock_of):
        product_id = list_product(quantity=5)
        order_id = place_order((product_id, 2))
        for status in ("confirmed", "processing", "shipped"):
            current_domain.process(UpdateOrderStatus(order_id=order_id, status=status), asynchronous=False)

        with pytest.raises(InvalidStateTransitionError):
            _cancel(order_id)
        assert stock_of(product_id) == 3

    def test_second_cancel_does_not_restock_twice(self, list_product, place_order, stock_of):
        product_id = list_product(quantity=5)
        order_id = place_order((product_id, 2))
        _cancel(order_id)

        with pytest.raises(InvalidStateTransitionError):
            _cancel(order_id)
        assert stock_of(product_id) == 5

    def test_missing_ledger_row_is_reported_not_fatal(self, list_product, place_order, stock_of):
        kept = list_product(name="Kept", quantity=5)
        gone = list_product(name="Gone", quantity=5)
        order_id = place_order((kept, 1), (gone, 2))
        current_domain.process(DeleteProduct(product_id=gone), asynchronous=False)

        result = _cancel(order_id)

        assert result.status == "cancelled"
        assert [(f.product_id, f.quantity) for f in result.restock_failures] == [(gone, 2)]
        assert stock_of(kept) == 5
        assert get_order(order_id).status == "cancelled"

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            _cancel("nope")
