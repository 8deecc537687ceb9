"""Product listing: filters, sorting and pagination over the catalog cache."""

from dataclasses import dataclass
from decimal import Decimal

from protean.utils.globals import current_domain

from commerce.catalogue.cache import ProductView, get_catalog_cache
from commerce.shared.exceptions import BusinessRuleError
from commerce.shared.money import to_money
from commerce.shared.sorting import by_key, merge_sort

DEFAULT_MAX_PAGE_SIZE = 100


def _lower(value):
    return value.lower() if value is not None else ""


_SORT_KEYS = {
    "name": lambda view: _lower(view.name),
    "price": lambda view: view.price,
    "category": lambda view: _lower(view.category_name),
    "quantity": lambda view: view.quantity_available,
    "createdat": lambda view: view.created_at,
    "id": lambda view: view.id,
}

_SORT_ALIASES = {
    "productname": "name",
    "categoryname": "category",
    "quantityavailable": "quantity",
    "productid": "id",
}

SORT_FIELDS = tuple(_SORT_KEYS)


@dataclass(frozen=True)
class ProductFilter:
    category: str | None = None
    min_price: Decimal | str | None = None
    max_price: Decimal | str | None = None
    search: str | None = None
    in_stock: bool | None = None

    def __post_init__(self):
        low = to_money(self.min_price, "min_price") if self.min_price is not None else None
        high = to_money(self.max_price, "max_price") if self.max_price is not None else None
        if (low is not None and low < 0) or (high is not None and high < 0):
            raise BusinessRuleError({"price": ["Price bounds cannot be negative"]})
        if low is not None and high is not None and low > high:
            raise BusinessRuleError({"price": ["Minimum price cannot be greater than maximum price"]})
        object.__setattr__(self, "min_price", low)
        object.__setattr__(self, "max_price", high)

    def matches(self, view: ProductView) -> bool:
        if self.category and self.category.strip():
            if _lower(view.category_name) != self.category.strip().lower():
                return False
        if self.min_price is not None and view.price < self.min_price:
            return False
        if self.max_price is not None and view.price > self.max_price:
            return False
        if self.search and self.search.strip():
            term = self.search.strip().lower()
            if term not in _lower(view.name) and term not in _lower(view.description):
                return False
        if self.in_stock is not None and view.in_stock != self.in_stock:
            return False
        return True


@dataclass(frozen=True)
class ProductPage:
    items: list[ProductView]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.size - 1) // self.size

    @property
    def has_next(self) -> bool:
        return (self.page + 1) * self.size < self.total


def _max_page_size():
    return current_domain.config.get("custom", {}).get("max_page_size", DEFAULT_MAX_PAGE_SIZE)


def _comparator(sort_by, direction):
    field = (sort_by or "createdAt").strip().lower()
    field = _SORT_ALIASES.get(field, field)
    if field not in _SORT_KEYS:
        raise BusinessRuleError(
            {"sort_by": [f"Invalid sort field: {sort_by}. Valid fields: {', '.join(SORT_FIELDS)}"]}
        )

    direction = (direction or "ASC").strip().upper()
    if direction not in ("ASC", "DESC"):
        raise BusinessRuleError({"direction": [f"Invalid sort direction: {direction}. Use ASC or DESC"]})

    return by_key(_SORT_KEYS[field], descending=direction == "DESC")


def get_product(product_id) -> ProductView:
    return get_catalog_cache().get_by_id(product_id)


def list_all_products() -> list[ProductView]:
    """Every product, newest first."""
    return get_catalog_cache().get_all()


def filter_products(filters: ProductFilter | None = None) -> list[ProductView]:
    products = get_catalog_cache().get_all()
    if filters is None:
        return products
    return [view for view in products if filters.matches(view)]


def count_products(filters: ProductFilter | None = None) -> int:
    return len(filter_products(filters))


def list_products(
    page: int = 0,
    size: int = 20,
    sort_by: str = "createdAt",
    direction: str = "DESC",
    filters: ProductFilter | None = None,
) -> ProductPage:
    if page < 0:
        raise BusinessRuleError({"page": ["Page number cannot be negative"]})
    if size <= 0:
        raise BusinessRuleError({"size": ["Page size must be greater than 0"]})
    if size > _max_page_size():
        raise BusinessRuleError({"size": [f"Page size cannot exceed {_max_page_size()}"]})

    compare = _comparator(sort_by, direction)
    ordered = merge_sort(filter_products(filters), compare)

    start = page * size
    return ProductPage(items=ordered[start : start + size], page=page, size=size, total=len(ordered))
