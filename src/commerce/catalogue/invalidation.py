"""Catalog cache invalidation.

Handlers run after the writing Unit of Work commits (events are processed
in-process), so the next read reloads committed state and never the half of
a transaction that is still in flight.
"""

from protean.utils.mixins import handle

from commerce.catalogue.cache import get_catalog_cache
from commerce.catalogue.category import Category
from commerce.catalogue.events import (
    CategoryRemoved,
    CategoryUpdated,
    ProductAdded,
    ProductRemoved,
    ProductUpdated,
)
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.inventory.events import StockLevelChanged
from commerce.inventory.record import InventoryRecord


@commerce.event_handler(part_of=Product)
class ProductCacheInvalidator:
    @handle(ProductAdded)
    def on_product_added(self, _event):
        get_catalog_cache().invalidate()

    @handle(ProductUpdated)
    def on_product_updated(self, _event):
        get_catalog_cache().invalidate()

    @handle(ProductRemoved)
    def on_product_removed(self, _event):
        get_catalog_cache().invalidate()


@commerce.event_handler(part_of=Category)
class CategoryCacheInvalidator:
    """Views carry the category name, so renames and removals invalidate too."""

    @handle(CategoryUpdated)
    def on_category_updated(self, _event):
        get_catalog_cache().invalidate()

    @handle(CategoryRemoved)
    def on_category_removed(self, _event):
        get_catalog_cache().invalidate()


@commerce.event_handler(part_of=InventoryRecord)
class StockCacheInvalidator:
    @handle(StockLevelChanged)
    def on_stock_level_changed(self, _event):
        get_catalog_cache().invalidate()
