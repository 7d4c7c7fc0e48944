"""
Pydantic schema definitions for the catalog module.

Attributes are snake_case in Python and camelCase in the persisted JSON
document (``categoryId``, ``createdAt``...), so every model uses a camel
alias generator. Always dump with ``by_alias=True`` when writing data out.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated, Literal


BadgeVariant = Literal["default", "hot"]
BADGE_VARIANTS = ("default", "hot")

CATALOG_VERSION = 1


def _as_utc(value: datetime) -> datetime:
    # Timestamps without an offset are taken to be UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredModel(CamelModel):
    """Base for models written to disk; unknown keys are kept as-is."""

    model_config = ConfigDict(extra="allow")


class Category(StoredModel):
    id: str
    name: str
    created_at: UtcDatetime


class Product(StoredModel):
    """A product card as shown on the storefront.

    ``badge_text`` and ``badge_variant`` are optional and are left out of
    the stored document when unset. ``image_url`` is always an https URL;
    the image itself is hosted elsewhere.
    """

    id: str
    category_id: str
    name: str
    description: str
    price_label: str
    image_url: str
    image_alt: str
    badge_text: Optional[str] = None
    badge_variant: Optional[BadgeVariant] = None
    created_at: UtcDatetime


class CatalogData(StoredModel):
    """The whole persisted document."""

    version: Literal[1] = CATALOG_VERSION
    updated_at: UtcDatetime
    categories: List[Category] = Field(default_factory=list)
    products: List[Product] = Field(default_factory=list)


class ProductInput(CamelModel):
    """Raw, unvalidated input for ``create_product``.

    Fields are plain strings on purpose: trimming, defaults and range
    checks happen in ``mutate.create_product`` so the admin always gets
    one readable message for the first problem found.
    """

    category_id: str = ""
    name: str = ""
    description: str = ""
    price_label: str = ""
    image_url: str = ""
    image_alt: str = ""
    badge_text: Optional[str] = None
    badge_variant: Optional[str] = None


class CategoryInput(CamelModel):
    name: str = ""


class PublicCatalog(CamelModel):
    categories: List[Category]
    products: List[Product]
