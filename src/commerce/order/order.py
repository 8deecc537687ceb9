"""Order aggregate.

State machine:
    pending    → confirmed | cancelled
    confirmed  → processing | cancelled
    processing → shipped | cancelled
    shipped    → delivered
    delivered, cancelled: terminal

The total is frozen at creation from each line's captured unit price and is
never recomputed from live product prices.
"""

from datetime import UTC, datetime
from decimal import Decimal as D
from enum import Enum

from protean.fields import DateTime, Decimal, HasMany, Identifier, Integer, String

from commerce.domain import commerce
from commerce.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from commerce.shared.exceptions import BusinessRuleError, InvalidStateTransitionError
from commerce.shared.money import ZERO, line_total


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING}

# Fulfilled orders are records of what shipped and are kept
_DELETABLE_STATES = _CANCELLABLE_STATES | {OrderStatus.CANCELLED}


def parse_status(value) -> OrderStatus:
    """Trim and lower-case ``value``, then map it onto a known status."""
    normalized = (value or "").strip().lower()
    try:
        return OrderStatus(normalized)
    except ValueError:
        valid = ", ".join(status.value for status in OrderStatus)
        raise InvalidStateTransitionError(
            {"status": [f"Invalid order status: {value}. Valid statuses are: {valid}"]}
        ) from None


@commerce.entity(part_of="Order")
class OrderItem:
    """One order line. The unit price is the price at the moment of ordering."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Decimal(required=True, min_value=0, precision=12, scale=2)

    @property
    def line_total(self):
        return line_total(self.unit_price, self.quantity)


@commerce.aggregate(limit=-1)
class Order:
    user_id = Identifier(required=True)
    status = String(max_length=20, choices=OrderStatus, default=OrderStatus.PENDING.value)
    total_amount = Decimal(required=True, min_value=0, precision=14, scale=2)
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, lines, status=OrderStatus.PENDING):
        """Create an order from resolved lines.

        Args:
            user_id: The ordering user.
            lines: Dicts with product_id, quantity and unit_price (Decimal).
            status: PENDING for explicit orders, CONFIRMED for cart checkouts.
        """
        if not lines:
            raise BusinessRuleError({"items": ["Order must contain at least one item"]})

        items = [
            OrderItem(product_id=line["product_id"], quantity=line["quantity"], unit_price=D(line["unit_price"]))
            for line in lines
        ]
        total = sum((item.line_total for item in items), ZERO)

        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            status=status.value,
            total_amount=total,
            items=items,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                status=order.status,
                total_amount=total,
                item_count=len(items),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    def _assert_can_transition(self, target):
        current = self.current_status
        if current == OrderStatus.CANCELLED:
            raise InvalidStateTransitionError({"status": ["Cannot update status of a cancelled order"]})
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidStateTransitionError(
                {"status": [f"Cannot transition from {current.value} to {target.value}"]}
            )

    def change_status(self, target: OrderStatus):
        """Move along the state machine.

        Cancelling goes through ``cancel()`` so the caller also restores stock.
        """
        self._assert_can_transition(target)
        if target == OrderStatus.CANCELLED:
            raise InvalidStateTransitionError({"status": ["Use order cancellation to cancel an order"]})
        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=self.status,
                changed_at=now,
            )
        )

    def cancel(self):
        current = self.current_status
        if current == OrderStatus.CANCELLED:
            raise InvalidStateTransitionError({"status": ["Order is already cancelled"]})
        if current not in _CANCELLABLE_STATES:
            raise InvalidStateTransitionError({"status": [f"Cannot cancel order that is already {current.value}"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=current.value,
                cancelled_at=now,
            )
        )

    def assert_deletable(self):
        """Reject deletion once the order has shipped."""
        current = self.current_status
        if current not in _DELETABLE_STATES:
            raise InvalidStateTransitionError({"status": [f"Cannot delete an order that is already {current.value}"]})

    @property
    def holds_stock(self) -> bool:
        """True while the order's quantities are still taken out of the ledger."""
        return self.current_status != OrderStatus.CANCELLED
