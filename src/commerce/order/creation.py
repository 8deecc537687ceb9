"""Explicit order creation: command and handler.

Orders created from an item list start ``pending``.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.identity.registration import require_user
from commerce.order.order import Order, OrderStatus
from commerce.order.placement import RequestedLine, resolve_and_reserve
from commerce.shared.exceptions import BusinessRuleError
from commerce.shared.money import to_money

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class CreateOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{"product_id", "quantity", "unit_price"?}]


def parse_requested_items(raw) -> list[RequestedLine]:
    try:
        items = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise BusinessRuleError({"items": ["Items must be a JSON list"]}) from None

    if not isinstance(items, list):
        raise BusinessRuleError({"items": ["Items must be a JSON list"]})

    lines = []
    for item in items:
        if not isinstance(item, dict) or not item.get("product_id"):
            raise BusinessRuleError({"items": ["Every item needs a product_id"]})

        quantity = item.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool):
            raise BusinessRuleError({"quantity": ["Quantity must be a whole number"]})

        unit_price = item.get("unit_price")
        if unit_price is not None:
            unit_price = to_money(unit_price, "unit_price")
            if unit_price < 0:
                raise BusinessRuleError({"unit_price": ["Unit price cannot be negative"]})

        lines.append(RequestedLine(product_id=str(item["product_id"]), quantity=quantity, unit_price=unit_price))
    return lines


@commerce.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        require_user(command.user_id)
        requested = parse_requested_items(command.items)

        lines = resolve_and_reserve(requested)
        order = Order.place(command.user_id, lines, status=OrderStatus.PENDING)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order created",
            order_id=str(order.id),
            user_id=str(command.user_id),
            total_amount=str(order.total_amount),
            items=len(lines),
        )
        return str(order.id)
