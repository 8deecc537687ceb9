"""Order deletion.

Only orders that have not shipped may be deleted. An order that still holds
stock returns it to the ledger before it goes.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.order.order import Order, OrderItem
from commerce.order.placement import restore_stock

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)


@commerce.command_handler(part_of=Order)
class OrderDeletionHandler:
    @handle(DeleteOrder)
    def delete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.assert_deletable()

        failures = restore_stock(order) if order.holds_stock else []

        item_dao = current_domain.repository_for(OrderItem)._dao
        for item in list(order.items):
            item_dao.delete(item)
        repo._dao.delete(order)

        logger.info("Order deleted", order_id=str(command.order_id), restock_failures=len(failures))
        return tuple(failures)
