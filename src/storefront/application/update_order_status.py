"""Application service: Update Order Status use case (admin)."""

from __future__ import annotations

import logging

from storefront.application.dto import OrderDTO
from storefront.application.mappers import order_to_dto
from storefront.domain.exceptions import NotFound
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.principal import Principal, Role, require_role
from storefront.domain.repository.order_repository import OrderRepository

log = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, principal: Principal | None, order_id: int, new_status: str) -> OrderDTO:
        """Move an order to *new_status*.

        The status value is checked before the order is looked up, so an
        invalid value is a BadRequest even for an unknown order. Stock is
        not returned on cancellation.
        """
        admin = require_role(principal, Role.ADMIN)
        status = OrderStatus.parse(new_status)

        previous: list[OrderStatus] = []

        def transition(order: Order) -> None:
            previous.append(order.status)
            order.change_status(status)

        # Checked against the stored status, under the repository's lock.
        order = self._order_repo.update(order_id, transition)
        if order is None:
            raise NotFound("order not found")

        if previous[0] != status:
            log.info(
                "Order #%s status %s -> %s by %s",
                order.id, previous[0].value, status.value, admin.id,
            )
        return order_to_dto(order)
