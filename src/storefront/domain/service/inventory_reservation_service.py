"""Domain service: Inventory Reservation.

Reserves stock for order lines through the repository's atomic
compare-and-decrement, and undoes a partial multi-line reservation when a
later line fails, so an order attempt either holds stock for every line or
for none of them.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from storefront.domain.exceptions import NotFound, OrderTimeout
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservationRequest:
    product_id: str
    quantity: int
    size: str | None = None


@dataclass(frozen=True)
class StockReservation:
    """Stock taken for one line, and the product as it was right after."""

    product_id: str
    quantity: int
    size: str | None
    product: Product


class InventoryReservationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def reserve_stock(
        self, product_id: str, quantity: int, size: str | None = None
    ) -> StockReservation:
        """Atomically take *quantity* units of a product.

        Raises NotFound for an unknown product and InsufficientStock (with
        nothing decremented) when the product cannot cover the quantity.
        """
        product = self._product_repo.decrement_stock(product_id, quantity, size)
        if product is None:
            raise NotFound(f"product not found: {product_id}")
        log.debug(
            "Reserved %s of product %s (size=%s), %s left",
            quantity, product_id, size, product.count_in_stock,
        )
        return StockReservation(product_id, quantity, size, product)

    def release(self, reservation: StockReservation) -> None:
        """Give back the stock taken by *reservation*."""
        restored = self._product_repo.increment_stock(
            reservation.product_id, reservation.quantity, reservation.size
        )
        if restored is None:
            log.error(
                "Could not release %s of product %s: product no longer exists",
                reservation.quantity, reservation.product_id,
            )

    def reserve_all(
        self,
        requests: list[ReservationRequest],
        deadline: float | None = None,
    ) -> list[StockReservation]:
        """Reserve every request in order, or none of them.

        Args:
            requests: lines to reserve, processed strictly in list order.
            deadline: a ``time.monotonic()`` value; once passed, the attempt
                is abandoned with OrderTimeout.

        On any failure the reservations already made in this call are
        released before the error propagates.
        """
        reserved: list[StockReservation] = []
        try:
            for request in requests:
                if deadline is not None and time.monotonic() > deadline:
                    raise OrderTimeout("order placement timed out")
                reserved.append(
                    self.reserve_stock(request.product_id, request.quantity, request.size)
                )
        except Exception:
            if reserved:
                log.warning("Rolling back %d stock reservation(s)", len(reserved))
            for reservation in reversed(reserved):
                self.release(reservation)
            raise
        return reserved
