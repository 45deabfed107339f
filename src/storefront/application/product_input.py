"""Validation boundary for admin-supplied product fields.

Derived fields (``count_in_stock`` and ``status``) come out of here only as
*requests*; the Inventory Model decides what is actually stored.
"""

from __future__ import annotations

from storefront.application.dto import SizeDTO
from storefront.domain.exceptions import BadRequest
from storefront.domain.model.product import ProductStatus, SizeStock, check_unique_labels
from storefront.domain.model.value_objects import Money


def parse_name(raw: str | None) -> str:
    name = (raw or "").strip()
    if not 2 <= len(name) <= 160:
        raise BadRequest("Product name must be between 2 and 160 characters")
    return name


def parse_required(field_name: str, raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        raise BadRequest(f"{field_name} is required")
    return value


def parse_price(raw: str | None) -> Money:
    if raw is None or str(raw).strip() == "":
        raise BadRequest("price is required")
    return Money.of(raw)


def parse_sizes(raw: list[SizeDTO]) -> list[SizeStock]:
    sizes = [SizeStock(label=s.label.strip().upper(), stock=s.stock) for s in raw]
    check_unique_labels(sizes)
    return sizes


def parse_count(raw: int | None) -> int | None:
    if raw is None:
        return None
    if not isinstance(raw, int) or isinstance(raw, bool) or raw < 0:
        raise BadRequest("countInStock must be a non-negative integer")
    return raw


def parse_status(raw: str | None) -> ProductStatus | None:
    if raw is None:
        return None
    return ProductStatus.parse(raw.strip().lower())
