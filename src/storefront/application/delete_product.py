"""Application service: Delete Product use case (admin).

A product that any order still points at is discontinued instead of
removed, so order history keeps resolving.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import NotFound
from storefront.domain.model.inventory import derive_after_write
from storefront.domain.model.principal import Principal, Role, require_role
from storefront.domain.model.product import ProductStatus
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository

log = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(self, product_repo: ProductRepository, order_repo: OrderRepository) -> None:
        self._product_repo = product_repo
        self._order_repo = order_repo

    def handle(self, principal: Principal | None, product_id: str) -> str:
        """Returns ``"deleted"`` or ``"discontinued"``."""
        require_role(principal, Role.ADMIN)

        if self._product_repo.get_by_id(product_id) is None:
            raise NotFound(f"Product with ID '{product_id}' not found")

        if self._order_repo.references_product(product_id):
            self._product_repo.update(
                product_id,
                lambda p: derive_after_write(p, requested_status=ProductStatus.DISCONTINUED),
            )
            log.info("Product %s is referenced by orders, discontinued instead", product_id)
            return "discontinued"

        self._product_repo.delete(product_id)
        log.info("Product %s deleted", product_id)
        return "deleted"
