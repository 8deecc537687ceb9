"""Cart item management: commands and handler.

Stock checks here read the ledger directly and are advisory: checkout
validates again against the ledger before anything is reduced.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from commerce.cart.cart import ShoppingCart
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.identity.registration import require_user
from commerce.inventory.ledger import get_by_product


@commerce.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="ShoppingCart")
class UpdateCartItemQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@commerce.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@commerce.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


def _available(product_id):
    current_domain.repository_for(Product).get(product_id)
    return get_by_product(product_id).quantity


@commerce.command_handler(part_of=ShoppingCart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        require_user(command.user_id)
        available = _available(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_none(command.user_id) or ShoppingCart.open_for(command.user_id)
        line = cart.add_or_merge(command.product_id, command.quantity, available)
        repo.add(cart)
        return line

    @handle(UpdateCartItemQuantity)
    def update_quantity(self, command):
        require_user(command.user_id)
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_none(command.user_id)
        if cart is None or cart.line_for(command.product_id) is None:
            raise ObjectNotFoundError(f"Product {command.product_id} is not in the cart")

        available = _available(command.product_id)
        line = cart.set_quantity(command.product_id, command.quantity, available)
        repo.add(cart)
        return line

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        require_user(command.user_id)
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_none(command.user_id)
        if cart is None:
            raise ObjectNotFoundError(f"Product {command.product_id} is not in the cart")

        cart.remove(command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        require_user(command.user_id)
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_none(command.user_id)
        if cart is None:
            return

        cart.clear()
        repo.add(cart)
