"""Application services: category catalog.

Reads are public; writes need the admin role.
"""

from __future__ import annotations

import uuid

from storefront.application.dto import CategoryDTO
from storefront.application.mappers import category_to_dto
from storefront.domain.exceptions import Conflict, NotFound
from storefront.domain.model.category import Category, slugify, validate_category_name
from storefront.domain.model.principal import Principal, Role, require_role
from storefront.domain.repository.category_repository import CategoryRepository


class ListCategoriesHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(self) -> list[CategoryDTO]:
        return [category_to_dto(c) for c in self._category_repo.list_all()]


class ShowCategoryHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(self, slug: str) -> CategoryDTO:
        category = self._category_repo.get_by_slug(slug)
        if category is None:
            raise NotFound("Not found")
        return category_to_dto(category)


class AddCategoryHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(
        self, principal: Principal | None, name: str, description: str | None = None
    ) -> CategoryDTO:
        require_role(principal, Role.ADMIN)
        name = validate_category_name(name)
        slug = slugify(name)
        if self._category_repo.get_by_slug(slug) is not None:
            raise Conflict("Category existed")

        category = Category(
            id=uuid.uuid4().hex,
            name=name,
            slug=slug,
            description=(description or "").strip(),
        )
        self._category_repo.save(category)
        return category_to_dto(category)


class UpdateCategoryHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(
        self,
        principal: Principal | None,
        category_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> CategoryDTO:
        require_role(principal, Role.ADMIN)
        category = self._category_repo.get_by_id(category_id)
        if category is None:
            raise NotFound("Not found")

        if name is not None:
            category.rename(name)
            clash = self._category_repo.get_by_slug(category.slug)
            if clash is not None and clash.id != category.id:
                raise Conflict("Category existed")
        if description is not None:
            category.description = description.strip()

        self._category_repo.save(category)
        return category_to_dto(category)


class DeleteCategoryHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(self, principal: Principal | None, category_id: str) -> None:
        require_role(principal, Role.ADMIN)
        if not self._category_repo.delete(category_id):
            raise NotFound("Not found")
