"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, stock moves, and products are discontinued rather than
deleted while an order still points at them.

``count_in_stock`` and ``status`` are stored but derived; the functions in
``storefront.domain.model.inventory`` are the only code that sets them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import BadRequest
from storefront.domain.model.value_objects import Money

SIZE_LABELS = ("XS", "S", "M", "L", "XL", "XXL")
SIZED_CATEGORIES = frozenset({"Top", "Bottom"})

_PRODUCT_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class ProductStatus(Enum):
    AVAILABLE = "available"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"

    @staticmethod
    def parse(raw: str) -> ProductStatus:
        try:
            return ProductStatus(raw)
        except ValueError:
            raise BadRequest(f"invalid product status: {raw!r}") from None


def is_sized_category(category: str) -> bool:
    return category in SIZED_CATEGORIES


def is_valid_product_id(ref: object) -> bool:
    return isinstance(ref, str) and bool(_PRODUCT_ID_RE.match(ref))


@dataclass(frozen=True)
class SizeStock:
    """Stock held for one size label."""

    label: str
    stock: int

    def __post_init__(self) -> None:
        if self.label not in SIZE_LABELS:
            raise BadRequest(
                f"invalid size label {self.label!r}; expected one of {', '.join(SIZE_LABELS)}"
            )
        if not isinstance(self.stock, int) or isinstance(self.stock, bool) or self.stock < 0:
            raise BadRequest(f"stock for size {self.label} must be a non-negative integer")


def check_unique_labels(sizes: list[SizeStock]) -> None:
    seen: set[str] = set()
    for size in sizes:
        if size.label in seen:
            raise BadRequest(f"duplicate size label {size.label}")
        seen.add(size.label)


@dataclass
class Product:
    """A product in the catalog.

    Mutable because admin edits and stock reservations are legitimate
    mutations on the aggregate; each of them ends with a call to
    ``derive_after_write``.
    """

    id: str
    name: str
    category: str
    price: Money
    brand: str = ""
    sizes: list[SizeStock] = field(default_factory=list)
    count_in_stock: int = 0
    status: ProductStatus = ProductStatus.OUT_OF_STOCK
    description: str = ""
    image: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def tracks_sizes(self) -> bool:
        """Sized categories always track sizes; other categories do once they have any."""
        return is_sized_category(self.category) or bool(self.sizes)

    @property
    def is_discontinued(self) -> bool:
        return self.status == ProductStatus.DISCONTINUED

    @property
    def sizes_total(self) -> int:
        return sum(s.stock for s in self.sizes)

    def find_size(self, label: str) -> int | None:
        """Index of the bucket for *label*, or None."""
        for i, size in enumerate(self.sizes):
            if size.label == label:
                return i
        return None

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        Existing orders are unaffected; they captured a price snapshot at
        creation time.
        """
        self.price = new_price
