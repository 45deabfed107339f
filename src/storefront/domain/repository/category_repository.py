"""Abstract repository for Category aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.category import Category


class CategoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, category_id: str) -> Category | None:
        """Return a category by its ID, or None if not found."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Category | None:
        """Return a category by its slug, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Category]:
        """Return every category, ordered by name."""

    @abstractmethod
    def save(self, category: Category) -> None:
        """Persist a new or updated category."""

    @abstractmethod
    def delete(self, category_id: str) -> bool:
        """Remove a category. Returns False if it did not exist."""
