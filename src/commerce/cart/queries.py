"""Read side of carts: lines, details, counts and totals."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from commerce.cart.cart import CartItem, ShoppingCart
from commerce.catalogue.product import Product
from commerce.identity.registration import require_user
from commerce.shared.money import ZERO, line_total
from commerce.shared.sorting import by_key, merge_sort


@dataclass(frozen=True)
class CartLine:
    """A cart line joined with the product's current name and price."""

    product_id: str
    product_name: str
    description: str | None
    unit_price: Decimal
    quantity: int
    added_at: datetime | None
    updated_at: datetime | None

    @property
    def line_total(self) -> Decimal:
        return line_total(self.unit_price, self.quantity)


def _cart(user_id) -> ShoppingCart | None:
    return current_domain.repository_for(ShoppingCart).get_or_none(user_id)


def get_cart_item(user_id, product_id) -> CartItem:
    cart = _cart(user_id)
    line = cart.line_for(product_id) if cart else None
    if line is None:
        raise ObjectNotFoundError(f"Cart item for user {user_id} and product {product_id} not found")
    return line


def list_cart(user_id) -> list[CartItem]:
    require_user(user_id)
    cart = _cart(user_id)
    if cart is None:
        return []
    return merge_sort(cart.items, by_key(lambda item: item.added_at))


def list_cart_with_details(user_id) -> list[CartLine]:
    """Lines whose product still exists, in the order they were added."""
    products = current_domain.repository_for(Product)
    lines = []
    for item in list_cart(user_id):
        product = products.get_or_none(item.product_id)
        if product is None:
            continue
        lines.append(
            CartLine(
                product_id=str(item.product_id),
                product_name=product.name,
                description=product.description,
                unit_price=product.price,
                quantity=item.quantity,
                added_at=item.added_at,
                updated_at=item.updated_at,
            )
        )
    return lines


def cart_count(user_id) -> int:
    return len(list_cart(user_id))


def cart_total(user_id) -> Decimal:
    """Sum of quantity times each product's current price."""
    return sum((line.line_total for line in list_cart_with_details(user_id)), ZERO)
