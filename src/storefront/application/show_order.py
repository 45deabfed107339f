"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.application.mappers import order_to_dto
from storefront.domain.exceptions import NotFound
from storefront.domain.model.principal import Principal, require_identity
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, principal: Principal | None, order_id: int) -> OrderDTO:
        principal = require_identity(principal)
        order = self._order_repo.get_by_id(order_id)
        # Someone else's order is reported exactly like a missing one.
        if order is None or not (principal.is_admin or order.user_id == principal.id):
            raise NotFound("order not found")
        return order_to_dto(order)
