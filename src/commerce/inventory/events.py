"""Domain events for the InventoryRecord aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="InventoryRecord")
class StockLevelChanged:
    """The available quantity for a product changed.

    ``reason`` is one of ``initialized``, ``reduced``, ``added`` or ``set``.
    """

    __version__ = 1

    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)
    reason: String(required=True, max_length=20)
    changed_at: DateTime(required=True)


@commerce.event(part_of="InventoryRecord")
class StockDepleted:
    """Available quantity reached zero."""

    __version__ = 1

    product_id: Identifier(required=True)
    depleted_at: DateTime(required=True)
