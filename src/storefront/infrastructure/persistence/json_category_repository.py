"""JSON-file-backed implementation of CategoryRepository."""

from __future__ import annotations

import json
from pathlib import Path

from storefront.domain.model.category import Category
from storefront.domain.repository.category_repository import CategoryRepository
from storefront.infrastructure.persistence.locks import lock_for


class JsonCategoryRepository(CategoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = lock_for(file_path)
        self._ensure_file()

    # --- CategoryRepository interface -----------------------------------------

    def get_by_id(self, category_id: str) -> Category | None:
        for raw in self._load_raw():
            if raw["id"] == category_id:
                return self._to_domain(raw)
        return None

    def get_by_slug(self, slug: str) -> Category | None:
        for raw in self._load_raw():
            if raw["slug"] == slug:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Category]:
        categories = [self._to_domain(raw) for raw in self._load_raw()]
        return sorted(categories, key=lambda c: c.name.lower())

    def save(self, category: Category) -> None:
        with self._lock:
            records = [r for r in self._load_raw() if r["id"] != category.id]
            records.append(self._to_raw(category))
            self._persist_raw(records)

    def delete(self, category_id: str) -> bool:
        with self._lock:
            records = self._load_raw()
            kept = [r for r in records if r["id"] != category_id]
            if len(kept) == len(records):
                return False
            self._persist_raw(kept)
            return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(category: Category) -> dict:
        return {
            "id": category.id,
            "name": category.name,
            "slug": category.slug,
            "description": category.description,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Category:
        return Category(
            id=raw["id"],
            name=raw["name"],
            slug=raw["slug"],
            description=raw.get("description", ""),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text("[]", encoding="utf-8")
