"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.exceptions import InvariantViolation
from storefront.domain.model.order import Order, OrderLineItem, OrderStatus
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.locks import lock_for

log = logging.getLogger(__name__)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = lock_for(file_path)
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        orders = self._load_raw()
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_idempotency_key(self, key: str) -> Order | None:
        for raw in self._load_raw():
            if raw.get("idempotency_key") == key:
                return self._to_domain(raw)
        return None

    def list_by_user(self, user_id: str) -> list[Order]:
        return self._newest_first(
            self._to_domain(raw) for raw in self._load_raw() if raw.get("user_id") == user_id
        )

    def list_page(self, skip: int, limit: int) -> list[Order]:
        orders = self._newest_first(self._to_domain(raw) for raw in self._load_raw())
        return orders[skip : skip + limit]

    def count(self) -> int:
        return len(self._load_raw())

    def references_product(self, product_id: str) -> bool:
        return any(
            item["product_id"] == product_id
            for raw in self._load_raw()
            for item in raw["items"]
        )

    def save(self, order: Order) -> None:
        with self._lock:
            orders = self._load_raw()

            if order.id is None:
                order.id = self.next_id()

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    replaced = True
                    break
            if not replaced:
                orders.append(self._to_raw(order))

            self._persist_raw(orders)

    def update(self, order_id: int, mutate: Callable[[Order], None]) -> Order | None:
        with self._lock:
            orders = self._load_raw()
            for i, raw in enumerate(orders):
                if raw["id"] == order_id:
                    order = self._to_domain(raw)
                    mutate(order)
                    orders[i] = self._to_raw(order)
                    self._persist_raw(orders)
                    return order
            return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _newest_first(orders) -> list[Order]:
        return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "shipping_address": order.shipping_address,
            "created_at": order.created_at.isoformat(),
            "idempotency_key": order.idempotency_key,
            "total_amount": str(order.total_amount.amount),
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "size": item.size,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = tuple(
            OrderLineItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                size=i.get("size"),
            )
            for i in raw["items"]
        )
        order = Order(
            id=raw["id"],
            user_id=raw.get("user_id"),
            items=items,
            shipping_address=raw.get("shipping_address", ""),
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            idempotency_key=raw.get("idempotency_key"),
        )
        if "total_amount" in raw and Decimal(raw["total_amount"]) != order.total_amount.amount:
            log.error(
                "Corrupted order #%s: stored total %s, items sum to %s",
                order.id, raw["total_amount"], order.total_amount.amount,
            )
            raise InvariantViolation(f"stored total of order #{order.id} is inconsistent")
        return order

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        tmp = self._file_path.with_suffix(".tmp")
        tmp.write_text(json.dumps(orders, indent=2) + "\n", encoding="utf-8")
        tmp.replace(self._file_path)

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text("[]", encoding="utf-8")
