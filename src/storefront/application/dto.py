"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from math import ceil


@dataclass(frozen=True)
class CartItemSpec:
    """Input: one cart line as submitted (quantity is coerced later)."""

    product_ref: object
    quantity: object = 1
    size: str | None = None


@dataclass(frozen=True)
class CartSpec:
    items: list[CartItemSpec]
    shipping_address: str = ""
    idempotency_key: str | None = None


@dataclass(frozen=True)
class SizeDTO:
    label: str
    stock: int


@dataclass(frozen=True)
class ProductSpec:
    """Input: fields an admin may write. None means 'not supplied'."""

    name: str | None = None
    category: str | None = None
    price: str | None = None
    brand: str | None = None
    description: str | None = None
    image: str | None = None
    sizes: list[SizeDTO] | None = None
    count_in_stock: int | None = None
    status: str | None = None


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    category: str
    price: str
    brand: str
    sizes: list[SizeDTO]
    count_in_stock: int
    status: str
    description: str
    image: str
    created_at: str


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    size: str | None = None


@dataclass(frozen=True)
class OrderDTO:
    id: int
    user_id: str | None
    status: str
    items: list[OrderLineItemDTO]
    total_amount: str
    shipping_address: str
    created_at: str


@dataclass(frozen=True)
class CategoryDTO:
    id: str
    name: str
    slug: str
    description: str


@dataclass(frozen=True)
class PageDTO:
    """Output: one page of a listing plus the paging metadata."""

    meta: dict
    items: list = field(default_factory=list)

    @staticmethod
    def build(items: list, page: int, limit: int, total: int) -> PageDTO:
        return PageDTO(
            meta={
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": max(ceil(total / limit), 1),
                "hasNextPage": page * limit < total,
                "hasPrevPage": page > 1,
            },
            items=items,
        )
