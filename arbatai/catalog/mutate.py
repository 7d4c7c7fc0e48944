"""
Create and delete categories and products.

Every operation is one read-modify-write cycle against the store: read
the full document, validate, build a new ``CatalogData`` with the changed
collection replaced, and hand it back to ``write_catalog``. Input
problems raise ``ValidationError`` / ``ConflictError`` before anything
is written.
"""

from __future__ import annotations

import logging
import re
import secrets
import unicodedata
import uuid
from typing import Iterable, Optional, Set
from urllib.parse import urlsplit

from ..errors import ConflictError, ValidationError
from .schemas import BADGE_VARIANTS, Category, ProductInput, Product
from .store import CatalogStore, utcnow


logger = logging.getLogger(__name__)

CATEGORY_NAME_MAX = 60
PRODUCT_NAME_MAX = 80
DESCRIPTION_MAX = 200
PRICE_LABEL_MAX = 20
IMAGE_URL_MAX = 2000

ID_SUFFIX_ATTEMPTS = 10

_RE_WHITESPACE = re.compile(r"\s+")
_RE_QUOTES = re.compile(r"['\"]")
_RE_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_name(value: Optional[str]) -> str:
    """Trim and collapse inner whitespace runs to a single space."""
    return _RE_WHITESPACE.sub(" ", (value or "").strip())


def slugify(value: str) -> str:
    """Turn a display name into a URL-safe id candidate.

    Accented letters are folded to their ASCII base ("Žalioji" ->
    "zalioji"); anything else outside ``[a-z0-9]`` becomes a hyphen.
    May return an empty string.
    """
    folded = unicodedata.normalize("NFKD", value.strip())
    folded = "".join(ch for ch in folded if unicodedata.category(ch) != "Mn")
    s = _RE_QUOTES.sub("", folded.lower())
    s = _RE_NON_ALNUM.sub("-", s)
    return s.strip("-")


def _random_id() -> str:
    return str(uuid.uuid4())


def unique_id(base: str, used: Set[str]) -> str:
    """Return ``base`` or a suffixed variant that is not in ``used``.

    After ``ID_SUFFIX_ATTEMPTS`` colliding suffixes a random UUID is used,
    so this always terminates.
    """
    if base not in used:
        return base
    for _ in range(ID_SUFFIX_ATTEMPTS):
        candidate = f"{base}-{secrets.token_hex(2)}"
        if candidate not in used:
            return candidate
    return _random_id()


def _new_id(name: str, existing: Iterable[str]) -> str:
    return unique_id(slugify(name) or _random_id(), set(existing))


# Categories


def create_category(store: CatalogStore, name: str) -> Category:
    name = normalize_name(name)
    if not name:
        raise ValidationError("Category name is required.")
    if len(name) > CATEGORY_NAME_MAX:
        raise ValidationError(f"Category name is too long (max {CATEGORY_NAME_MAX} chars).")

    catalog = store.read_catalog()
    wanted = name.casefold()
    if any(c.name.casefold() == wanted for c in catalog.categories):
        raise ConflictError("Category already exists.")

    now = utcnow()
    category = Category(
        id=_new_id(name, (c.id for c in catalog.categories)),
        name=name,
        created_at=now,
    )
    store.write_catalog(
        catalog.model_copy(
            update={"updated_at": now, "categories": [*catalog.categories, category]}
        )
    )
    logger.info("Created category %s (%s)", category.id, category.name)
    return category


def delete_category(store: CatalogStore, category_id: str) -> bool:
    """Delete a category and every product in it.

    Returns ``False`` without writing when the id is unknown.
    """
    catalog = store.read_catalog()
    categories = [c for c in catalog.categories if c.id != category_id]
    if len(categories) == len(catalog.categories):
        logger.debug("Category %s not found, nothing to delete", category_id)
        return False

    products = [p for p in catalog.products if p.category_id != category_id]
    store.write_catalog(
        catalog.model_copy(
            update={"updated_at": utcnow(), "categories": categories, "products": products}
        )
    )
    logger.info(
        "Deleted category %s and %d product(s)",
        category_id,
        len(catalog.products) - len(products),
    )
    return True


# Products


def _check_image_url(url: str) -> None:
    try:
        parts = urlsplit(url)
    except ValueError:
        raise ValidationError("Image URL is invalid.") from None
    if not parts.scheme:
        raise ValidationError("Image URL is invalid.")
    if parts.scheme != "https":
        raise ValidationError("Image URL must be https.")
    if not parts.hostname:
        raise ValidationError("Image URL is invalid.")


def _check_length(value: str, limit: int, missing: str, too_long: str) -> None:
    if not value:
        raise ValidationError(missing)
    if len(value) > limit:
        raise ValidationError(too_long)


def create_product(store: CatalogStore, data: ProductInput) -> Product:
    """Validate ``data`` and append a new product.

    Checks run in a fixed order and the first failure is raised; the
    category lookup is last since it is the only one that needs the
    stored document.
    """
    category_id = (data.category_id or "").strip()
    name = normalize_name(data.name)
    description = (data.description or "").strip()
    price_label = (data.price_label or "").strip()
    image_url = (data.image_url or "").strip()
    image_alt = (data.image_alt or "").strip() or name
    badge_text = (data.badge_text or "").strip() or None
    badge_variant = (data.badge_variant or "").strip() or None

    if not category_id:
        raise ValidationError("Category is required.")
    _check_length(
        name,
        PRODUCT_NAME_MAX,
        "Product name is required.",
        f"Product name is too long (max {PRODUCT_NAME_MAX} chars).",
    )
    _check_length(
        description,
        DESCRIPTION_MAX,
        "Product description is required.",
        f"Product description is too long (max {DESCRIPTION_MAX} chars).",
    )
    _check_length(price_label, PRICE_LABEL_MAX, "Price is required.", "Price is too long.")
    _check_length(image_url, IMAGE_URL_MAX, "Image URL is required.", "Image URL is too long.")
    _check_image_url(image_url)
    if badge_variant is not None and badge_variant not in BADGE_VARIANTS:
        raise ValidationError("Badge variant is invalid.")

    catalog = store.read_catalog()
    if not any(c.id == category_id for c in catalog.categories):
        raise ValidationError("Category does not exist.")

    now = utcnow()
    product = Product(
        id=_new_id(name, (p.id for p in catalog.products)),
        category_id=category_id,
        name=name,
        description=description,
        price_label=price_label,
        image_url=image_url,
        image_alt=image_alt,
        badge_text=badge_text,
        badge_variant=badge_variant,
        created_at=now,
    )
    store.write_catalog(
        catalog.model_copy(update={"updated_at": now, "products": [*catalog.products, product]})
    )
    logger.info("Created product %s in category %s", product.id, category_id)
    return product


def delete_product(store: CatalogStore, product_id: str) -> bool:
    catalog = store.read_catalog()
    products = [p for p in catalog.products if p.id != product_id]
    if len(products) == len(catalog.products):
        logger.debug("Product %s not found, nothing to delete", product_id)
        return False

    store.write_catalog(
        catalog.model_copy(update={"updated_at": utcnow(), "products": products})
    )
    logger.info("Deleted product %s", product_id)
    return True
