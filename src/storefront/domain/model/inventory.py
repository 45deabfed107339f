"""Inventory Model — stock and status invariants for a single product.

Invariants, holding after every write:
- a product that tracks sizes has ``count_in_stock == sum(sizes.stock)``
- a product not discontinued is ``available`` iff ``count_in_stock > 0``
- ``discontinued`` is only ever set or cleared by an explicit admin write

Every write path (create, admin update, reservation, compensation) funnels
through ``derive_after_write`` so the rules live in exactly one place.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from storefront.domain.exceptions import BadRequest, InsufficientStock, InvariantViolation
from storefront.domain.model.product import Product, ProductStatus

log = logging.getLogger(__name__)


def derive_status(count_in_stock: int, current: ProductStatus | None = None) -> ProductStatus:
    if current == ProductStatus.DISCONTINUED:
        return ProductStatus.DISCONTINUED
    if count_in_stock > 0:
        return ProductStatus.AVAILABLE
    return ProductStatus.OUT_OF_STOCK


def derive_after_write(
    product: Product,
    *,
    supplied_count: int | None = None,
    requested_status: ProductStatus | None = None,
    strict: bool = False,
) -> Product:
    """Re-derive ``count_in_stock`` and ``status`` in place and return the product.

    Args:
        supplied_count: a stock count the caller asked for. Authoritative for
            products without a size breakdown; ignored (lenient) or checked
            (strict) for products that track sizes.
        requested_status: a status the caller asked for. Only
            ``discontinued`` is kept verbatim; any other explicit value lifts
            a discontinuation and lets the status be derived again.
        strict: raise ``InvariantViolation`` instead of silently fixing a
            supplied count that disagrees with the size breakdown.
    """
    if product.tracks_sizes:
        total = product.sizes_total
        if strict and supplied_count is not None and supplied_count != total:
            log.error(
                "Stock mismatch on product %s: supplied countInStock=%s, sizes sum to %s",
                product.id, supplied_count, total,
            )
            raise InvariantViolation(
                f"countInStock {supplied_count} does not match sum of sizes {total} "
                f"for {product.name}"
            )
        product.count_in_stock = total
    elif supplied_count is not None:
        product.count_in_stock = supplied_count

    if not isinstance(product.count_in_stock, int) or product.count_in_stock < 0:
        log.error("Negative stock on product %s: %s", product.id, product.count_in_stock)
        raise InvariantViolation(
            f"countInStock must be a non-negative integer for {product.name}"
        )

    if requested_status == ProductStatus.DISCONTINUED:
        product.status = ProductStatus.DISCONTINUED
    elif requested_status is not None:
        product.status = derive_status(product.count_in_stock)
    else:
        product.status = derive_status(product.count_in_stock, product.status)
    return product


def check_consistent(product: Product) -> None:
    """Raise ``InvariantViolation`` if a stored record breaks the invariants."""
    if product.tracks_sizes and product.count_in_stock != product.sizes_total:
        log.error(
            "Corrupted product %s: countInStock=%s, sizes sum to %s",
            product.id, product.count_in_stock, product.sizes_total,
        )
        raise InvariantViolation(f"stored stock for {product.name} is inconsistent")
    if product.status != derive_status(product.count_in_stock, product.status):
        log.error("Corrupted product %s: status %s", product.id, product.status.value)
        raise InvariantViolation(f"stored status for {product.name} is inconsistent")


def _resolve_bucket(product: Product, size: str | None) -> int | None:
    if not product.tracks_sizes:
        return None
    if not size:
        raise BadRequest(f"size is required for {product.name}")
    index = product.find_size(size)
    if index is None:
        raise BadRequest(f"unknown size {size} for {product.name}")
    return index


def apply_decrement(product: Product, quantity: int, size: str | None = None) -> Product:
    """Take *quantity* units off the product, or raise with nothing changed.

    Products that track sizes are decremented from the named bucket and
    the aggregate follows; others are decremented on the aggregate.
    """
    if quantity <= 0:
        raise BadRequest("Reservation quantity must be positive")

    index = _resolve_bucket(product, size)
    available = product.count_in_stock if index is None else product.sizes[index].stock
    if quantity > available:
        raise InsufficientStock(product.id, product.name, quantity, available)

    if index is None:
        return derive_after_write(product, supplied_count=product.count_in_stock - quantity)

    bucket = product.sizes[index]
    product.sizes[index] = replace(bucket, stock=bucket.stock - quantity)
    return derive_after_write(product)


def apply_increment(product: Product, quantity: int, size: str | None = None) -> Product:
    """Put *quantity* units back (compensation for an abandoned reservation)."""
    if quantity <= 0:
        raise BadRequest("Release quantity must be positive")

    index = _resolve_bucket(product, size)
    if index is None:
        return derive_after_write(product, supplied_count=product.count_in_stock + quantity)

    bucket = product.sizes[index]
    product.sizes[index] = replace(bucket, stock=bucket.stock + quantity)
    return derive_after_write(product)
