"""Stock alerts: reacts to ledger events after they commit."""

import structlog
from protean.utils.mixins import handle

from commerce.domain import commerce
from commerce.inventory.events import StockDepleted
from commerce.inventory.record import InventoryRecord

logger = structlog.get_logger(__name__)


@commerce.event_handler(part_of=InventoryRecord)
class StockAlertHandler:
    @handle(StockDepleted)
    def on_stock_depleted(self, event: StockDepleted) -> None:
        logger.warning("Product is out of stock", product_id=str(event.product_id))
