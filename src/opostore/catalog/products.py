"""Shape catalog rows into products and derive slug search terms."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from opostore._constants import DESCRIPTION_PLACEHOLDER, PLACEHOLDER_IMAGE, PRICE_PLACEHOLDER
from opostore.models.product import Product

_logger = logging.getLogger(__name__)

_WORD_START_RE = re.compile(r"\b\w")
_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_STRIP_RE = re.compile(r"[^a-z0-9-]")


def slug_search_terms(slug: str) -> list[str]:
    """Name variants a slug may have come from, most literal first.

    ``"red-runner"`` gives ``["red-runner", "red runner", "Red-runner",
    "Red Runner"]``. Duplicates are dropped.
    """
    spaced = slug.replace("-", " ")
    candidates = [
        slug,
        spaced,
        slug[:1].upper() + slug[1:],
        _WORD_START_RE.sub(lambda m: m.group(0).upper(), spaced),
    ]
    return list(dict.fromkeys(candidates))


def slugify(name: str) -> str:
    """Item-page URL slug for a product name: ``"Runner's Pick!"`` gives ``"runners-pick"``."""
    return _SLUG_STRIP_RE.sub("", _WHITESPACE_RE.sub("-", name.lower()))


def _additional_images(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            _logger.error("Error parsing additional images: %r", value[:64])
            return []
    if not isinstance(value, list):
        return []
    return [str(image) for image in value if image]


def collect_images(row: dict[str, Any]) -> list[str]:
    """Main image, then the hover image if different, then additional images."""
    images: list[str] = []
    main = row.get("image")
    if main:
        images.append(str(main))
    hover = row.get("hoverImage")
    if hover and hover != main:
        images.append(str(hover))
    images.extend(_additional_images(row.get("additionalImages")))
    if not images:
        images.append(PLACEHOLDER_IMAGE)
    return images


def build_product(row: dict[str, Any], slug: str | None = None) -> Product:
    """Build the item-page product from a raw ``items`` row."""
    name = str(row.get("name") or "")
    return Product(
        id=row.get("id"),
        name=name,
        slug=slug if slug is not None else slugify(name),
        description=row.get("description") or DESCRIPTION_PLACEHOLDER,
        images=collect_images(row),
        price=row.get("price") or PRICE_PLACEHOLDER,
        category=row.get("category"),
        subcategory=row.get("subcategory"),
        description_image=row.get("descriptionImage") or None,
    )
