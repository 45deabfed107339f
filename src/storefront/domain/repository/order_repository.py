"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_idempotency_key(self, key: str) -> Order | None:
        """Return the order placed with *key*, or None."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Order]:
        """Return a user's orders, newest first."""

    @abstractmethod
    def list_page(self, skip: int, limit: int) -> list[Order]:
        """Return a slice of all orders, newest first."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored orders."""

    @abstractmethod
    def references_product(self, product_id: str) -> bool:
        """True if any order has a line item for *product_id*."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""

    @abstractmethod
    def update(self, order_id: int, mutate: Callable[[Order], None]) -> Order | None:
        """Atomically load an order, apply *mutate* to it and store the result.

        If *mutate* raises, nothing is written. Returns the stored order, or
        None if it does not exist.
        """
