"""Application services: order listings (queries)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, PageDTO
from storefront.application.mappers import order_to_dto
from storefront.domain.exceptions import BadRequest
from storefront.domain.model.principal import Principal, Role, require_identity, require_role
from storefront.domain.repository.order_repository import OrderRepository


class ListMyOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, principal: Principal | None) -> list[OrderDTO]:
        """The caller's own orders, newest first."""
        principal = require_identity(principal)
        return [order_to_dto(o) for o in self._order_repo.list_by_user(principal.id)]


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, principal: Principal | None, page: int = 1, limit: int = 20) -> PageDTO:
        """Every order, newest first, one page at a time (admin only)."""
        require_role(principal, Role.ADMIN)
        if page < 1 or limit < 1:
            raise BadRequest("page and limit must be at least 1")

        total = self._order_repo.count()
        orders = self._order_repo.list_page(skip=(page - 1) * limit, limit=limit)
        return PageDTO.build([order_to_dto(o) for o in orders], page, limit, total)
