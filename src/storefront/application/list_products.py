"""Application services: catalog queries (public)."""

from __future__ import annotations

from storefront.application.dto import PageDTO, ProductDTO
from storefront.application.mappers import product_to_dto
from storefront.domain.exceptions import NotFound
from storefront.domain.repository.product_repository import ProductQuery, ProductRepository


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, query: ProductQuery) -> PageDTO:
        result = self._product_repo.search(query)
        return PageDTO.build(
            [product_to_dto(p) for p in result.items],
            query.page,
            query.limit,
            result.total,
        )


class ShowProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> ProductDTO:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFound("Not found")
        return product_to_dto(product)
