"""Read-only view of the catalog for the storefront."""

from __future__ import annotations

import locale

from .schemas import Category, PublicCatalog
from .store import CatalogStore


def _name_key(category: Category):
    # Collate by the current locale, then fall back to the raw name so the
    # order is stable when the locale treats two names as equal.
    return (locale.strxfrm(category.name.casefold()), category.name)


def get_public_catalog(store: CatalogStore) -> PublicCatalog:
    """Categories by name, then products newest first.

    Products whose category no longer exists are left out. Deleting a
    category already removes its products, so this only matters for
    documents edited by hand.
    """
    catalog = store.read_catalog()
    categories = sorted(catalog.categories, key=_name_key)

    category_ids = {c.id for c in categories}
    products = [p for p in catalog.products if p.category_id in category_ids]
    products.sort(key=lambda p: p.created_at, reverse=True)

    return PublicCatalog(categories=categories, products=products)
