"""Read side of the stock ledger."""

from protean.utils.globals import current_domain

from commerce.inventory.record import InventoryRecord
from commerce.shared.exceptions import BusinessRuleError
from commerce.shared.sorting import by_key, merge_sort


def _repo():
    return current_domain.repository_for(InventoryRecord)


def get_by_product(product_id) -> InventoryRecord:
    """Raises ``ObjectNotFoundError`` when the product has no ledger row."""
    return _repo().get(product_id)


def find_by_product(product_id) -> InventoryRecord | None:
    return _repo().get_or_none(product_id)


def list_inventory() -> list[InventoryRecord]:
    return _repo()._dao.query.all().items


def list_sorted_by_quantity(ascending=True) -> list[InventoryRecord]:
    return merge_sort(list_inventory(), by_key(lambda record: record.quantity, descending=not ascending))


def list_below_threshold(threshold) -> list[InventoryRecord]:
    """Records with ``quantity < threshold``, lowest stock first."""
    if threshold is None or threshold < 0:
        raise BusinessRuleError({"threshold": ["Threshold cannot be negative"]})

    low = _repo()._dao.query.filter(quantity__lt=threshold).all().items
    return merge_sort(low, by_key(lambda record: record.quantity))


def list_out_of_stock() -> list[InventoryRecord]:
    return _repo()._dao.query.filter(quantity=0).all().items


def is_in_stock(product_id) -> bool:
    return get_by_product(product_id).quantity > 0


def has_enough_stock(product_id, quantity) -> bool:
    return get_by_product(product_id).can_supply(quantity)
