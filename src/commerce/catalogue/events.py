"""Domain events for the Category and Product aggregates."""

from protean.fields import DateTime, Decimal, Identifier, String

from commerce.domain import commerce


@commerce.event(part_of="Category")
class CategoryCreated:
    """A new category was added to the catalogue."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    parent_category_id: Identifier()


@commerce.event(part_of="Category")
class CategoryUpdated:
    """A category's name, description or parent changed."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    parent_category_id: Identifier()


@commerce.event(part_of="Category")
class CategoryRemoved:
    """A category was deleted from the catalogue."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)


@commerce.event(part_of="Product")
class ProductAdded:
    """A new product was listed."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Decimal(required=True)
    category_id: Identifier(required=True)
    created_at: DateTime(required=True)


@commerce.event(part_of="Product")
class ProductUpdated:
    """Product details or price changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Decimal(required=True)
    previous_price: Decimal()
    category_id: Identifier(required=True)


@commerce.event(part_of="Product")
class ProductRemoved:
    """A product was deleted from the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
