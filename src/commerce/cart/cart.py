"""Shopping cart aggregate: one per user, one line per product.

The cart is keyed by the user id, so every change to a user's cart contends
on a single aggregate version: two concurrent adds for the same product
cannot both read the old quantity and write back a lost update.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, HasMany, Identifier, Integer

from commerce.cart.events import CartCleared, CartItemAdded, CartItemQuantityChanged, CartItemRemoved
from commerce.domain import commerce
from commerce.shared.exceptions import BusinessRuleError, InsufficientStockError


class ClearReason(Enum):
    REQUESTED = "requested"
    CHECKOUT = "checkout"


def _require_positive(quantity):
    if quantity is None or quantity <= 0:
        raise BusinessRuleError({"quantity": ["Quantity must be greater than zero"]})


@commerce.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()
    updated_at = DateTime()


@commerce.aggregate(limit=-1)
class ShoppingCart:
    user_id = Identifier(identifier=True, required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open_for(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((item for item in self.items if str(item.product_id) == str(product_id)), None)

    def quantity_of(self, product_id):
        line = self.line_for(product_id)
        return line.quantity if line else 0

    @property
    def is_empty(self):
        return not self.items

    # -------------------------------------------------------------------
    # Changes
    # -------------------------------------------------------------------
    def add_or_merge(self, product_id, quantity, available):
        """Add ``quantity`` of a product, summing with any existing line.

        ``available`` is the ledger's current count; the merged total must fit.
        """
        _require_positive(quantity)

        line = self.line_for(product_id)
        existing = line.quantity if line else 0
        merged = existing + quantity
        if merged > available:
            raise InsufficientStockError(product_id, available=available, requested=merged)

        now = datetime.now(UTC)
        if line:
            line.quantity = merged
            line.updated_at = now
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, added_at=now, updated_at=now))
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                user_id=str(self.user_id),
                product_id=str(product_id),
                quantity_added=quantity,
                new_quantity=merged,
            )
        )
        return self.line_for(product_id)

    def set_quantity(self, product_id, quantity, available):
        """Replace a line's quantity. Zero or less is a removal and is rejected here."""
        _require_positive(quantity)

        line = self.line_for(product_id)
        if line is None:
            raise ObjectNotFoundError(f"Product {product_id} is not in the cart")
        if quantity > available:
            raise InsufficientStockError(product_id, available=available, requested=quantity)

        previous = line.quantity
        now = datetime.now(UTC)
        line.quantity = quantity
        line.updated_at = now
        self.updated_at = now

        self.raise_(
            CartItemQuantityChanged(
                user_id=str(self.user_id),
                product_id=str(product_id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )
        return line

    def remove(self, product_id):
        line = self.line_for(product_id)
        if line is None:
            raise ObjectNotFoundError(f"Product {product_id} is not in the cart")

        self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(user_id=str(self.user_id), product_id=str(product_id)))

    def clear(self, reason=ClearReason.REQUESTED):
        """Drop every line. Clearing an empty cart is fine and raises nothing."""
        lines = list(self.items)
        if not lines:
            return

        for line in lines:
            self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(user_id=str(self.user_id), items_removed=len(lines), reason=reason.value))
