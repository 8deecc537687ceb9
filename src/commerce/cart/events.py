"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was put in the cart, or its quantity grew by a repeated add."""

    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    new_quantity = Integer(required=True)


@commerce.event(part_of="ShoppingCart")
class CartItemQuantityChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@commerce.event(part_of="ShoppingCart")
class CartItemRemoved:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@commerce.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were dropped, either on request or because the cart was checked out."""

    __version__ = 1

    user_id = Identifier(required=True)
    items_removed = Integer(required=True)
    reason = String(required=True, max_length=20)
