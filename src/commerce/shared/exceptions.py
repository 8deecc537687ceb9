"""Business exceptions raised by the commerce domain.

All of them are Protean ``ValidationError`` subclasses so callers (and the
command processor) treat them like any other rule violation. Missing records
surface as ``protean.exceptions.ObjectNotFoundError`` straight from the
repositories, and persistence failures propagate untouched.
"""

from protean.exceptions import ValidationError


class BusinessRuleError(ValidationError):
    """A precondition of a business operation does not hold."""


class DuplicateResourceError(BusinessRuleError):
    """A resource with the same natural key already exists."""

    def __init__(self, resource, field, value):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__({field: [f"{resource} already exists with {field}: '{value}'"]})


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds what the ledger currently holds."""

    def __init__(self, product_id, available, requested, product_name=None):
        self.product_id = str(product_id)
        self.available = available
        self.requested = requested
        label = product_name or self.product_id
        super().__init__(
            {
                "quantity": [
                    f"Insufficient stock for product {label}. Available: {available}, Requested: {requested}"
                ]
            }
        )


class InvalidStateTransitionError(ValidationError):
    """The order cannot move to the requested status from where it is."""
