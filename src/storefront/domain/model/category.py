"""Category aggregate — a named, slug-addressed grouping of products."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

from storefront.domain.exceptions import BadRequest

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """'Áo Thun & Polo' -> 'ao-thun-polo'."""
    ascii_name = (
        unicodedata.normalize("NFKD", name.replace("đ", "d").replace("Đ", "D"))
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    return _NON_ALNUM.sub("-", ascii_name.lower()).strip("-")


def validate_category_name(name: str | None) -> str:
    name = (name or "").strip()
    if not 2 <= len(name) <= 80:
        raise BadRequest("Category name must be between 2 and 80 characters")
    if not slugify(name):
        raise BadRequest(f"Category name {name!r} has no usable characters")
    return name


@dataclass
class Category:
    id: str
    name: str
    slug: str
    description: str = ""

    def rename(self, name: str) -> None:
        self.name = validate_category_name(name)
        self.slug = slugify(self.name)
