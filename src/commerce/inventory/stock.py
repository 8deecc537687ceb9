"""Stock ledger mutations: commands and handler.

Each command touches a single product's record. Order placement and
cancellation reduce and restore stock inside their own handlers instead,
so the ledger change commits together with the order.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.inventory.record import InventoryRecord

logger = structlog.get_logger(__name__)


@commerce.command(part_of="InventoryRecord")
class SetStockQuantity:
    """Absolute set, for replenishment and audit corrections."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="InventoryRecord")
class ReduceStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="InventoryRecord")
class AddStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command_handler(part_of=InventoryRecord)
class StockLedgerHandler:
    @handle(SetStockQuantity)
    def set_quantity(self, command):
        repo = current_domain.repository_for(InventoryRecord)
        record = repo.get(command.product_id)
        record.set_quantity(command.quantity)
        repo.add(record)

        logger.info("Stock quantity set", product_id=str(command.product_id), quantity=record.quantity)
        return record.quantity

    @handle(ReduceStock)
    def reduce(self, command):
        repo = current_domain.repository_for(InventoryRecord)
        record = repo.get(command.product_id)
        record.reduce(command.quantity)
        repo.add(record)
        return record.quantity

    @handle(AddStock)
    def add(self, command):
        repo = current_domain.repository_for(InventoryRecord)
        record = repo.get(command.product_id)
        record.add(command.quantity)
        repo.add(record)
        return record.quantity
