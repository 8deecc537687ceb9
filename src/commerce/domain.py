"""SmartCommerce bounded context: catalogue, stock ledger, carts and orders.

All aggregates live in one domain so that a single Unit of Work can span an
order, its items, the ledger rows it reduces and the cart it consumes.
"""

import structlog
from protean.domain import Domain

commerce = Domain(name="commerce")

logger = structlog.get_logger(__name__)
