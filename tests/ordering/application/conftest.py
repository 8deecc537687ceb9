import json

import pytest
from protean import current_domain

from commerce.order.creation import CreateOrder


@pytest.fixture()
def place_order(register_user):
    """Place a pending order for a fresh user. ``lines`` are (product_id, quantity[, unit_price])."""

    def _place(*lines, user_id=None):
        user_id = user_id or register_user()
        items = []
        for line in lines:
            item = {"product_id": line[0], "quantity": line[1]}
            if len(line) > 2:
                item["unit_price"] = line[2]
            items.append(item)
        return current_domain.process(CreateOrder(user_id=user_id, items=json.dumps(items)), asynchronous=False)

    return _place
