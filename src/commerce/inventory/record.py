"""InventoryRecord aggregate: the stock ledger row for one product.

The record is keyed by the product id, so there is exactly one per product
and every writer of a product's stock contends on the same aggregate
version. A stale writer fails its commit with ``ExpectedVersionError`` and
the command handler re-runs against fresh state, which serializes the
check-then-decrement sequence per product.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer

from commerce.domain import commerce
from commerce.inventory.events import StockDepleted, StockLevelChanged
from commerce.shared.exceptions import BusinessRuleError, InsufficientStockError


class StockChangeReason(Enum):
    INITIALIZED = "initialized"
    REDUCED = "reduced"
    ADDED = "added"
    SET = "set"


def _require_positive(amount):
    if amount is None or amount <= 0:
        raise BusinessRuleError({"quantity": ["Quantity must be greater than zero"]})


@commerce.aggregate(limit=-1)
class InventoryRecord:
    product_id = Identifier(identifier=True, required=True)
    quantity = Integer(required=True, min_value=0, default=0)
    last_updated = DateTime()

    @classmethod
    def open(cls, product_id, quantity=0):
        """Create the ledger row for a freshly listed product."""
        if quantity is None or quantity < 0:
            raise BusinessRuleError({"quantity": ["Quantity cannot be negative"]})

        record = cls(product_id=product_id, quantity=quantity, last_updated=datetime.now(UTC))
        record._record_change(0, StockChangeReason.INITIALIZED)
        return record

    def can_supply(self, amount):
        return self.quantity >= amount

    def reduce(self, amount):
        """Take ``amount`` units out. Fails without side effects if stock is short."""
        _require_positive(amount)
        if not self.can_supply(amount):
            raise InsufficientStockError(self.product_id, available=self.quantity, requested=amount)

        previous = self.quantity
        self.quantity = previous - amount
        self._record_change(previous, StockChangeReason.REDUCED)

    def add(self, amount):
        """Put ``amount`` units back, for restocking or order cancellation."""
        _require_positive(amount)

        previous = self.quantity
        self.quantity = previous + amount
        self._record_change(previous, StockChangeReason.ADDED)

    def set_quantity(self, new_quantity):
        """Overwrite the count, for replenishment or audit corrections."""
        if new_quantity is None or new_quantity < 0:
            raise BusinessRuleError({"quantity": ["Quantity cannot be negative"]})

        previous = self.quantity
        self.quantity = new_quantity
        self._record_change(previous, StockChangeReason.SET)

    def _record_change(self, previous, reason):
        now = datetime.now(UTC)
        self.last_updated = now

        self.raise_(
            StockLevelChanged(
                product_id=str(self.product_id),
                previous_quantity=previous,
                new_quantity=self.quantity,
                reason=reason.value,
                changed_at=now,
            )
        )
        if self.quantity == 0 and previous > 0:
            self.raise_(StockDepleted(product_id=str(self.product_id), depleted_at=now))
