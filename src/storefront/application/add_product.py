"""Application service: Add Product use case (admin)."""

from __future__ import annotations

import logging
import uuid

from storefront.application import product_input
from storefront.application.dto import ProductDTO, ProductSpec
from storefront.application.mappers import product_to_dto
from storefront.domain.model.inventory import derive_after_write
from storefront.domain.model.principal import Principal, Role, require_role
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository

log = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, principal: Principal | None, spec: ProductSpec) -> ProductDTO:
        """Add a product to the catalog.

        A supplied stock count that disagrees with the size breakdown is
        silently replaced by the sum of the sizes.
        """
        require_role(principal, Role.ADMIN)

        product = Product(
            id=uuid.uuid4().hex,
            name=product_input.parse_name(spec.name),
            category=product_input.parse_required("category", spec.category),
            price=product_input.parse_price(spec.price),
            brand=product_input.parse_required("brand", spec.brand),
            sizes=product_input.parse_sizes(spec.sizes or []),
            description=(spec.description or "").strip(),
            image=(spec.image or "").strip(),
        )
        derive_after_write(
            product,
            supplied_count=product_input.parse_count(spec.count_in_stock),
            requested_status=product_input.parse_status(spec.status),
        )
        self._product_repo.save(product)

        log.info(
            "Product %s '%s' added: stock=%s status=%s",
            product.id, product.name, product.count_in_stock, product.status.value,
        )
        return product_to_dto(product)
