"""Order aggregate.

An order freezes a snapshot of what was bought and at what price. Its line
items and total never change after creation; only the status moves, and
only forward.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import BadRequest
from storefront.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @staticmethod
    def parse(raw: object) -> OrderStatus:
        try:
            return OrderStatus(raw)
        except ValueError:
            raise BadRequest("invalid status") from None


_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.PROCESSING, OrderStatus.PAID, OrderStatus.CANCELLED}
    ),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PAID: frozenset(
        {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class OrderLineItem:
    """Price/quantity snapshot of one product at order-creation time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    size: str | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


MAX_LINE_ITEMS = 50


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders. The ``__init__`` stays simple so
    the repository can reconstitute persisted orders.
    """

    id: int | None
    user_id: str | None
    items: tuple[OrderLineItem, ...]
    shipping_address: str = ""
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    idempotency_key: str | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str | None,
        items: list[OrderLineItem],
        shipping_address: str = "",
        idempotency_key: str | None = None,
    ) -> Order:
        if not items:
            raise BadRequest("items is required")
        if len(items) > MAX_LINE_ITEMS:
            raise BadRequest(f"Maximum {MAX_LINE_ITEMS} items per order")
        return Order(
            id=None,
            user_id=user_id,
            items=tuple(items),
            shipping_address=(shipping_address or "").strip(),
            idempotency_key=idempotency_key,
        )

    # --- State transitions ----------------------------------------------------

    def change_status(self, new_status: OrderStatus) -> bool:
        """Move to *new_status*. Returns False when it is already the status."""
        if new_status == self.status:
            return False
        if new_status not in _TRANSITIONS[self.status]:
            raise BadRequest(
                f"cannot change order status from {self.status.value} to {new_status.value}"
            )
        self.status = new_status
        return True

    # --- Computed properties --------------------------------------------------

    @property
    def total_amount(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result
