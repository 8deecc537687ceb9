"""Cart checkout: turns a user's cart into a confirmed order.

Stock for every line is validated before anything is written. The ledger
reductions, the new order and the emptied cart then commit together.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.cart.cart import ClearReason, ShoppingCart
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.identity.registration import require_user
from commerce.order.order import Order, OrderStatus
from commerce.order.placement import RequestedLine, resolve_and_reserve
from commerce.shared.exceptions import BusinessRuleError

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class CheckoutCart:
    user_id = Identifier(required=True)


@commerce.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(CheckoutCart)
    def checkout(self, command):
        require_user(command.user_id)

        carts = current_domain.repository_for(ShoppingCart)
        cart = carts.get_or_none(command.user_id)
        if cart is None or cart.is_empty:
            raise BusinessRuleError({"cart": ["Cart is empty"]})

        # Lines whose product has since been delisted are dropped with the cart
        products = current_domain.repository_for(Product)
        requested = [
            RequestedLine(product_id=str(item.product_id), quantity=item.quantity)
            for item in cart.items
            if products.get_or_none(item.product_id) is not None
        ]
        if not requested:
            raise BusinessRuleError({"cart": ["Cart is empty"]})

        # Unit prices are frozen at each product's current price
        lines = resolve_and_reserve(requested)

        order = Order.place(command.user_id, lines, status=OrderStatus.CONFIRMED)
        current_domain.repository_for(Order).add(order)

        cart.clear(reason=ClearReason.CHECKOUT)
        carts.add(cart)

        logger.info(
            "Cart checked out",
            order_id=str(order.id),
            user_id=str(command.user_id),
            total_amount=str(order.total_amount),
        )
        return str(order.id)
