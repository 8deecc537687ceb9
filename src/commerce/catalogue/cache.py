"""Catalog cache: a read-through, whole-collection cache of product views.

Freshness is tracked for the entire snapshot, not per entry: once loaded,
the snapshot answers every read until it is older than the TTL or someone
calls ``invalidate()``. Readers swap in a complete new snapshot with a
single attribute assignment, so nobody ever sees a half-built collection.

The process-wide instance has an explicit lifecycle:
``configure_catalog_cache()`` at start-up, ``get_catalog_cache()`` to use it,
``install_catalog_cache()`` to inject one (tests, alternative loaders) and
``reset_catalog_cache()`` at shutdown.
"""

import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 300


@dataclass(frozen=True)
class ProductView:
    """Product as the catalogue shows it, with its ledger quantity joined in."""

    id: str
    name: str
    description: str | None
    price: Decimal
    category_id: str
    category_name: str | None
    quantity_available: int
    created_at: datetime | None

    @property
    def in_stock(self) -> bool:
        return self.quantity_available > 0


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int

    @property
    def reads(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Percentage of reads served from the snapshot."""
        if self.reads == 0:
            return 0.0
        return self.hits * 100.0 / self.reads

    def __str__(self) -> str:
        return f"[CACHE] Hits: {self.hits}, Misses: {self.misses}, Hit Rate: {self.hit_rate:.1f}%"


@dataclass(frozen=True)
class _Snapshot:
    products: dict
    loaded_at: float


class CatalogCache:
    def __init__(
        self,
        load_all: Callable[[], Sequence[ProductView]] | None = None,
        load_one: Callable[[str], ProductView] | None = None,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._load_all = load_all or load_catalog
        self._load_one = load_one or load_product_view
        self.ttl_seconds = ttl_seconds
        self._clock = clock

        self._snapshot: _Snapshot | None = None
        self._generation = 0
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_all(self) -> list[ProductView]:
        snapshot = self._fresh_snapshot()
        if snapshot is not None:
            self._count(hit=True)
            return list(snapshot.products.values())

        self._count(hit=False)
        return list(self._reload().products.values())

    def get_by_id(self, product_id) -> ProductView:
        """Look one product up.

        A fresh snapshot is taken to be complete, so an id it does not hold is
        reported missing without asking the store. A cold or expired cache
        fetches just that row and leaves the snapshot alone.
        """
        snapshot = self._fresh_snapshot()
        if snapshot is not None:
            self._count(hit=True)
            try:
                return snapshot.products[str(product_id)]
            except KeyError:
                raise ObjectNotFoundError(f"Product with id {product_id} not found") from None

        self._count(hit=False)
        return self._load_one(str(product_id))

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None
            self._generation += 1
        logger.debug("Catalog cache invalidated")

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses)

    def report_stats(self) -> CacheStats:
        """Write the current counters to the log and return them."""
        stats = self.stats()
        logger.info(str(stats), hits=stats.hits, misses=stats.misses, hit_rate=round(stats.hit_rate, 1))
        return stats

    @property
    def is_fresh(self) -> bool:
        return self._fresh_snapshot() is not None

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _fresh_snapshot(self) -> _Snapshot | None:
        snapshot = self._snapshot
        if snapshot is None or self._clock() - snapshot.loaded_at >= self.ttl_seconds:
            return None
        return snapshot

    def _reload(self) -> _Snapshot:
        with self._lock:
            generation = self._generation
        started = self._clock()

        views = self._load_all()
        snapshot = _Snapshot(products={view.id: view for view in views}, loaded_at=started)

        with self._lock:
            # An invalidation during the load means the data may predate a write
            if generation == self._generation:
                self._snapshot = snapshot
        logger.debug("Catalog cache reloaded", products=len(snapshot.products))
        return snapshot

    def _count(self, hit: bool) -> None:
        with self._lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1


# ---------------------------------------------------------------------------
# Loaders backed by the domain repositories
# ---------------------------------------------------------------------------
def _to_view(product, quantity, category_name) -> ProductView:
    return ProductView(
        id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        category_id=str(product.category_id),
        category_name=category_name,
        quantity_available=quantity,
        created_at=product.created_at,
    )


def load_catalog() -> list[ProductView]:
    """Every product, newest first, with stock and category name joined in."""
    from commerce.catalogue.category import Category
    from commerce.catalogue.product import Product
    from commerce.inventory.ledger import list_inventory

    products = current_domain.repository_for(Product)._dao.query.order_by("-created_at").all().items
    stock = {str(record.product_id): record.quantity for record in list_inventory()}
    categories = {
        str(category.id): category.name for category in current_domain.repository_for(Category)._dao.query.all().items
    }
    return [
        _to_view(product, stock.get(str(product.id), 0), categories.get(str(product.category_id)))
        for product in products
    ]


def load_product_view(product_id) -> ProductView:
    from commerce.catalogue.category import Category
    from commerce.catalogue.product import Product
    from commerce.inventory.ledger import find_by_product

    product = current_domain.repository_for(Product).get(product_id)
    record = find_by_product(product_id)
    category = current_domain.repository_for(Category).get_or_none(product.category_id)
    return _to_view(
        product,
        record.quantity if record is not None else 0,
        category.name if category is not None else None,
    )


# ---------------------------------------------------------------------------
# Process-wide instance
# ---------------------------------------------------------------------------
_cache_instance: CatalogCache | None = None


def _configured_ttl() -> float:
    if current_domain:
        return current_domain.config.get("custom", {}).get("catalog_cache_ttl_seconds", DEFAULT_TTL_SECONDS)
    return DEFAULT_TTL_SECONDS


def configure_catalog_cache(ttl_seconds: float | None = None) -> CatalogCache:
    """Build the process-wide cache. Call once at start-up."""
    global _cache_instance
    _cache_instance = CatalogCache(ttl_seconds=ttl_seconds if ttl_seconds is not None else _configured_ttl())
    return _cache_instance


def get_catalog_cache() -> CatalogCache:
    if _cache_instance is None:
        return configure_catalog_cache()
    return _cache_instance


def install_catalog_cache(cache: CatalogCache) -> CatalogCache:
    global _cache_instance
    _cache_instance = cache
    return cache


def reset_catalog_cache() -> None:
    """Tear the process-wide cache down; the next ``get_catalog_cache()`` builds a new one."""
    global _cache_instance
    _cache_instance = None
