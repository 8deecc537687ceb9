"""Stock-checked order placement shared by explicit orders and cart checkout.

Every line is validated against the ledger before any record is touched.
Only once all of them pass are the ledger rows reduced, and the caller adds
the order in the same Unit of Work, so either everything commits or
nothing does.
"""

from dataclasses import dataclass
from decimal import Decimal

import structlog
from protean.utils.globals import current_domain

from commerce.catalogue.product import Product
from commerce.inventory.record import InventoryRecord
from commerce.shared.exceptions import BusinessRuleError, InsufficientStockError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RequestedLine:
    product_id: str
    quantity: int
    unit_price: Decimal | None = None


def resolve_and_reserve(requested: list[RequestedLine]) -> list[dict]:
    """Validate ``requested`` and take its stock out of the ledger.

    Returns the resolved lines (product id, quantity, frozen unit price).
    Raises ``ObjectNotFoundError`` for unknown products,
    ``InsufficientStockError`` if any product is short, in which case no
    ledger row has been changed.
    """
    if not requested:
        raise BusinessRuleError({"items": ["Order must contain at least one item"]})

    products = current_domain.repository_for(Product)
    ledger = current_domain.repository_for(InventoryRecord)

    records = {}
    demand = {}
    resolved = []
    for line in requested:
        if line.quantity is None or line.quantity <= 0:
            raise BusinessRuleError({"quantity": ["Quantity must be greater than zero"]})

        product = products.get(line.product_id)
        product_id = str(product.id)
        if product_id not in records:
            records[product_id] = ledger.get(product_id)

        # A product listed twice is checked against its combined quantity
        demand[product_id] = demand.get(product_id, 0) + line.quantity
        record = records[product_id]
        if not record.can_supply(demand[product_id]):
            raise InsufficientStockError(
                product_id,
                available=record.quantity,
                requested=demand[product_id],
                product_name=product.name,
            )

        resolved.append(
            {
                "product_id": product_id,
                "quantity": line.quantity,
                "unit_price": line.unit_price if line.unit_price is not None else product.price,
            }
        )

    for product_id, quantity in demand.items():
        record = records[product_id]
        record.reduce(quantity)
        ledger.add(record)

    return resolved


@dataclass(frozen=True)
class RestockFailure:
    product_id: str
    quantity: int
    reason: str


@dataclass(frozen=True)
class CancellationResult:
    """Outcome of a cancellation.

    The order is cancelled even when some lines could not be restocked;
    those lines are listed in ``restock_failures``.
    """

    order_id: str
    status: str
    restock_failures: tuple = ()

    @property
    def fully_restocked(self) -> bool:
        return not self.restock_failures


def restore_stock(order) -> list[RestockFailure]:
    """Put every line's quantity back into the ledger, best-effort.

    A line whose ledger record is gone is reported rather than raised so the
    rest of the order still gets restocked.
    """
    ledger = current_domain.repository_for(InventoryRecord)

    failures = []
    for item in order.items:
        product_id = str(item.product_id)
        record = ledger.get_or_none(product_id)
        if record is None:
            failures.append(RestockFailure(product_id, item.quantity, f"No inventory record for product {product_id}"))
            logger.warning(
                "Restock skipped",
                order_id=str(order.id),
                product_id=product_id,
                quantity=item.quantity,
            )
            continue

        record.add(item.quantity)
        ledger.add(record)

    return failures
