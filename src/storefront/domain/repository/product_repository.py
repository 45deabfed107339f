"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.exceptions import BadRequest
from storefront.domain.model.product import Product

SORT_KEYS = ("newest", "price_asc", "price_desc", "name_asc", "name_desc")


@dataclass(frozen=True)
class ProductQuery:
    """Catalog listing filter. ``keyword`` is matched by the storage layer's text search."""

    category: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    keyword: str | None = None
    in_stock: bool = False
    sort: str = "newest"
    page: int = 1
    limit: int = 20

    def __post_init__(self) -> None:
        if self.sort not in SORT_KEYS:
            raise BadRequest(f"invalid sort {self.sort!r}; expected one of {', '.join(SORT_KEYS)}")
        if self.page < 1 or self.limit < 1:
            raise BadRequest("page and limit must be at least 1")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise BadRequest("minPrice cannot exceed maxPrice")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class ProductPage:
    items: list[Product]
    total: int


_SORTS = {
    "newest": (lambda p: p.created_at, True),
    "price_asc": (lambda p: p.price.amount, False),
    "price_desc": (lambda p: p.price.amount, True),
    "name_asc": (lambda p: p.name.lower(), False),
    "name_desc": (lambda p: p.name.lower(), True),
}


def matches(product: Product, query: ProductQuery) -> bool:
    if query.category and product.category != query.category:
        return False
    if query.min_price is not None and product.price.amount < query.min_price:
        return False
    if query.max_price is not None and product.price.amount > query.max_price:
        return False
    if query.in_stock and (product.count_in_stock <= 0 or product.is_discontinued):
        return False
    if query.keyword:
        haystack = f"{product.name} {product.brand} {product.category}".lower()
        # Any term matches, like a document store's text index.
        if not any(term in haystack for term in query.keyword.lower().split()):
            return False
    return True


def apply_query(products: list[Product], query: ProductQuery) -> ProductPage:
    """Filter, sort and slice in memory, for stores without their own query engine."""
    key, reverse = _SORTS[query.sort]
    hits = sorted((p for p in products if matches(p, query)), key=key, reverse=reverse)
    return ProductPage(items=hits[query.skip : query.skip + query.limit], total=len(hits))


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def search(self, query: ProductQuery) -> ProductPage:
        """Return one page of products matching *query* plus the total match count."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def delete(self, product_id: str) -> bool:
        """Remove a product. Returns False if it did not exist."""

    @abstractmethod
    def decrement_stock(
        self, product_id: str, quantity: int, size: str | None = None
    ) -> Product | None:
        """Atomically apply ``inventory.apply_decrement`` to the stored product.

        The read, the availability check and the write happen as one step
        per product, so concurrent calls can never overdraw stock. Returns
        the updated product, or None if it does not exist. Raises
        ``InsufficientStock`` without writing anything.
        """

    @abstractmethod
    def increment_stock(
        self, product_id: str, quantity: int, size: str | None = None
    ) -> Product | None:
        """Atomically apply ``inventory.apply_increment`` to the stored product."""

    @abstractmethod
    def update(self, product_id: str, mutate: Callable[[Product], None]) -> Product | None:
        """Atomically load a product, apply *mutate* to it and store the result.

        Admin edits go through here rather than ``get_by_id`` + ``save`` so a
        reservation committed in between is never overwritten. If *mutate*
        raises, nothing is written. Returns the stored product, or None if it
        does not exist.
        """
