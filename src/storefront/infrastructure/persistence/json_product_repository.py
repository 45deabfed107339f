"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.inventory import apply_decrement, apply_increment, check_consistent
from storefront.domain.model.product import Product, ProductStatus, SizeStock
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import (
    ProductPage,
    ProductQuery,
    ProductRepository,
    apply_query,
)
from storefront.infrastructure.persistence.locks import lock_for


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = lock_for(file_path)
        self._ensure_file()

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._load_raw():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def search(self, query: ProductQuery) -> ProductPage:
        products = [self._to_domain(raw, checked=False) for raw in self._load_raw()]
        page = apply_query(products, query)
        for product in page.items:
            check_consistent(product)
        return page

    def save(self, product: Product) -> None:
        with self._lock:
            records = [r for r in self._load_raw() if r["id"] != product.id]
            records.append(self._to_raw(product))
            self._persist_raw(records)

    def delete(self, product_id: str) -> bool:
        with self._lock:
            records = self._load_raw()
            kept = [r for r in records if r["id"] != product_id]
            if len(kept) == len(records):
                return False
            self._persist_raw(kept)
            return True

    def update(self, product_id: str, mutate: Callable[[Product], None]) -> Product | None:
        return self._modify(product_id, mutate)

    def decrement_stock(
        self, product_id: str, quantity: int, size: str | None = None
    ) -> Product | None:
        # apply_decrement raises before any write
        return self._modify(product_id, lambda p: apply_decrement(p, quantity, size))

    def increment_stock(
        self, product_id: str, quantity: int, size: str | None = None
    ) -> Product | None:
        return self._modify(product_id, lambda p: apply_increment(p, quantity, size))

    def _modify(self, product_id: str, mutate: Callable[[Product], object]) -> Product | None:
        """Load-mutate-write one record while holding the file lock."""
        with self._lock:
            records = self._load_raw()
            for i, raw in enumerate(records):
                if raw["id"] == product_id:
                    product = self._to_domain(raw)
                    mutate(product)
                    records[i] = self._to_raw(product)
                    self._persist_raw(records)
                    return product
            return None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "category": product.category,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "brand": product.brand,
            "sizes": [{"label": s.label, "stock": s.stock} for s in product.sizes],
            "countInStock": product.count_in_stock,
            "status": product.status.value,
            "description": product.description,
            "image": product.image,
            "createdAt": product.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict, checked: bool = True) -> Product:
        product = Product(
            id=raw["id"],
            name=raw["name"],
            category=raw["category"],
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            brand=raw.get("brand", ""),
            sizes=[SizeStock(s["label"], s["stock"]) for s in raw.get("sizes", [])],
            count_in_stock=raw.get("countInStock", 0),
            status=ProductStatus(raw.get("status", "out_of_stock")),
            description=raw.get("description", ""),
            image=raw.get("image", ""),
            created_at=datetime.fromisoformat(raw["createdAt"]),
        )
        if checked:
            check_consistent(product)
        return product

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        tmp = self._file_path.with_suffix(".tmp")
        tmp.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        tmp.replace(self._file_path)

    def _ensure_file(self) -> None:
        with self._lock:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text("[]", encoding="utf-8")
