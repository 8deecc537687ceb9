"""Order cancellation with best-effort stock restoration."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.order.order import Order
from commerce.order.placement import CancellationResult, restore_stock

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


def cancel_and_restock(order) -> CancellationResult:
    """Cancel ``order`` and hand its quantities back to the ledger.

    The caller persists the order. Lines that could not be restocked do not
    stop the cancellation; they come back in the result.
    """
    order.cancel()
    failures = restore_stock(order)

    if failures:
        logger.warning("Order cancelled with restock failures", order_id=str(order.id), failures=len(failures))
    else:
        logger.info("Order cancelled", order_id=str(order.id))

    return CancellationResult(order_id=str(order.id), status=order.status, restock_failures=tuple(failures))


@commerce.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        result = cancel_and_restock(order)
        repo.add(order)
        return result
