"""Application service: Update Product use case (admin)."""

from __future__ import annotations

import logging

from storefront.application import product_input
from storefront.application.dto import ProductDTO, ProductSpec
from storefront.application.mappers import product_to_dto
from storefront.domain.exceptions import NotFound
from storefront.domain.model.inventory import derive_after_write
from storefront.domain.model.principal import Principal, Role, require_role
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository

log = logging.getLogger(__name__)


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, principal: Principal | None, product_id: str, spec: ProductSpec) -> ProductDTO:
        """Apply a partial update.

        Price changes do NOT affect existing orders; they captured a price
        snapshot at creation time. Stock is validated strictly: a supplied
        count that disagrees with the sizes is rejected, not fixed.

        The edit is applied to the stored record inside the repository's
        atomic update, so stock taken by an order placed meanwhile is kept.
        """
        require_role(principal, Role.ADMIN)

        # Validate everything up front; the mutation itself only assigns.
        name = product_input.parse_name(spec.name) if spec.name is not None else None
        category = (
            product_input.parse_required("category", spec.category)
            if spec.category is not None
            else None
        )
        price = product_input.parse_price(spec.price) if spec.price is not None else None
        brand = product_input.parse_required("brand", spec.brand) if spec.brand is not None else None
        sizes = product_input.parse_sizes(spec.sizes) if spec.sizes is not None else None
        supplied_count = product_input.parse_count(spec.count_in_stock)
        requested_status = product_input.parse_status(spec.status)

        def apply(product: Product) -> None:
            if name is not None:
                product.name = name
            if category is not None:
                product.category = category
            if price is not None:
                product.update_price(price)
            if brand is not None:
                product.brand = brand
            if spec.description is not None:
                product.description = spec.description.strip()
            if spec.image is not None:
                product.image = spec.image.strip()
            if sizes is not None:
                product.sizes = sizes
            derive_after_write(
                product,
                supplied_count=supplied_count,
                requested_status=requested_status,
                strict=True,
            )

        product = self._product_repo.update(product_id, apply)
        if product is None:
            raise NotFound(f"Product with ID '{product_id}' not found")

        log.info(
            "Product %s updated: stock=%s status=%s",
            product.id, product.count_in_stock, product.status.value,
        )
        return product_to_dto(product)
