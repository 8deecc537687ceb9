"""Order status updates driven through the order state machine.

A ``cancelled`` target runs the same cancel-and-restock flow as
``CancelOrder`` and returns its ``CancellationResult``. Any other target
returns the new status string.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.order.cancellation import cancel_and_restock
from commerce.order.order import Order, OrderStatus, parse_status

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@commerce.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        target = parse_status(command.status)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if target == OrderStatus.CANCELLED and order.current_status != OrderStatus.CANCELLED:
            result = cancel_and_restock(order)
            repo.add(order)
            return result

        order.change_status(target)
        logger.info("Order status updated", order_id=str(order.id), status=order.status)

        repo.add(order)
        return order.status
