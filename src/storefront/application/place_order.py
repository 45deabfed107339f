"""Application service: Place Order use case.

Turns a cart into a persisted pending order. Works in two phases:

1. Validate the cart size and every line (reference format, existence,
   not discontinued, enough stock right now) before touching anything.
2. Reserve each line atomically, in cart order, capturing the unit price
   of the product as it stood at reservation. If a later line loses a race
   for stock, runs past the deadline, or the order cannot be saved, the
   earlier reservations are released before the error propagates.
"""

from __future__ import annotations

import logging
import time

from storefront.application.dto import CartSpec, OrderDTO
from storefront.application.mappers import order_to_dto
from storefront.domain.exceptions import BadRequest, InsufficientStock, NotFound
from storefront.domain.model.order import MAX_LINE_ITEMS, Order, OrderLineItem
from storefront.domain.model.principal import Principal
from storefront.domain.model.product import Product, is_valid_product_id
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.inventory_reservation_service import (
    InventoryReservationService,
    ReservationRequest,
)

log = logging.getLogger(__name__)


class PlaceOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        timeout_seconds: float | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._timeout_seconds = timeout_seconds

    def handle(self, cart: CartSpec, principal: Principal | None = None) -> OrderDTO:
        """Place an order; authentication is optional."""
        deadline = (
            time.monotonic() + self._timeout_seconds
            if self._timeout_seconds is not None
            else None
        )

        if cart.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(cart.idempotency_key)
            if existing is not None:
                log.info(
                    "Order #%s already placed for idempotency key %s",
                    existing.id, cart.idempotency_key,
                )
                return order_to_dto(existing)

        requests = self._validate(cart)

        svc = InventoryReservationService(self._product_repo)
        try:
            reservations = svc.reserve_all(requests, deadline=deadline)
        except NotFound as exc:
            # Deleted between validation and reservation.
            raise BadRequest(str(exc)) from exc

        line_items = [
            OrderLineItem(
                product_id=r.product.id,
                product_name=r.product.name,
                quantity=Quantity(r.quantity),
                unit_price=r.product.price,  # <-- price snapshot
                size=r.size,
            )
            for r in reservations
        ]

        try:
            order = Order.create(
                user_id=principal.id if principal else None,
                items=line_items,
                shipping_address=cart.shipping_address,
                idempotency_key=cart.idempotency_key,
            )
            self._order_repo.save(order)
        except Exception:
            log.warning("Order could not be saved, releasing its stock")
            for reservation in reversed(reservations):
                svc.release(reservation)
            raise

        log.info(
            "Order #%s placed: %d line(s), total %s, user=%s",
            order.id, len(order.items), order.total_amount, order.user_id,
        )
        return order_to_dto(order)

    # --- Phase 1 --------------------------------------------------------------

    def _validate(self, cart: CartSpec) -> list[ReservationRequest]:
        if not cart.items:
            raise BadRequest("items is required")
        if len(cart.items) > MAX_LINE_ITEMS:
            raise BadRequest(f"Maximum {MAX_LINE_ITEMS} items per order")

        # Quantities already claimed by earlier lines for the same stock.
        claimed: dict[tuple[str, str | None], int] = {}
        requests: list[ReservationRequest] = []
        for spec in cart.items:
            ref = spec.product_ref
            if not is_valid_product_id(ref):
                raise BadRequest(f"invalid product: {ref}")

            product = self._product_repo.get_by_id(ref)  # type: ignore[arg-type]
            if product is None:
                raise BadRequest(f"product not found: {ref}")
            if product.is_discontinued:
                raise BadRequest(f"product discontinued: {product.name}")

            qty = Quantity.coerce(spec.quantity).value
            key = (product.id, spec.size if product.tracks_sizes else None)
            wanted = claimed.get(key, 0) + qty
            if wanted > self._available(product, spec.size):
                raise InsufficientStock(
                    product.id, product.name, wanted, self._available(product, spec.size)
                )
            claimed[key] = wanted

            requests.append(ReservationRequest(product.id, qty, key[1]))
        return requests

    @staticmethod
    def _available(product: Product, size: str | None) -> int:
        if not product.tracks_sizes:
            return product.count_in_stock
        if not size:
            raise BadRequest(f"size is required for {product.name}")
        index = product.find_size(size)
        if index is None:
            raise BadRequest(f"unknown size {size} for {product.name}")
        return product.sizes[index].stock
